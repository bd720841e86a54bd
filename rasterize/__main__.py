import sys

from rasterize.cli import main

sys.exit(main())
