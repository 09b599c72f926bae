import sys

from litedata.cli import main

sys.exit(main())
