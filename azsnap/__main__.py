import sys

from azsnap.cli import main

sys.exit(main())
