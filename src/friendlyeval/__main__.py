import sys

from friendlyeval.cli import main

sys.exit(main())
