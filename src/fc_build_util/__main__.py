from fc_build_util.cli import main

raise SystemExit(main())
