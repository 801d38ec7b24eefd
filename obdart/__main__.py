from obdart.obdart_cli import main

raise SystemExit(main())
