import sys

from sysmonitor.cli import main

sys.exit(main())
