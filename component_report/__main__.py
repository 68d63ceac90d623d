from component_report.cli import main

raise SystemExit(main())
