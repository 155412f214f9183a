import sys

from anomaly_engine.cli import main

sys.exit(main())
