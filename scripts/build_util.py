#!/usr/bin/env python3
"""
build_util.py — Package a function executable into a Function Compute zip.

Repository-local wrapper around fc_build_util.cli for use without installing
the console script.

Usage:
    uv run python scripts/build_util.py [-o <zip>] <executable> [<file|dir> ...]

Example:
    uv run python scripts/build_util.py -o .build/handler.zip target/handler conf/
"""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from fc_build_util.cli import main  # noqa: E402  (must be after sys.path modification)

if __name__ == "__main__":
    raise SystemExit(main())
