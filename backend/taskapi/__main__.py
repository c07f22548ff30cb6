import sys

from taskapi.cli import main

sys.exit(main())
