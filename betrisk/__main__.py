from betrisk.cli import main

raise SystemExit(main())
