from http_replay.cli.main import main

raise SystemExit(main())
