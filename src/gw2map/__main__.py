import sys

from gw2map.cli import main

sys.exit(main())
