from map_cleaner.cli import main

raise SystemExit(main())
