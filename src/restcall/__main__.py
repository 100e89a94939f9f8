from restcall.cli import main

raise SystemExit(main())
