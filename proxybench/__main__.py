from proxybench.main import main

raise SystemExit(main())
