import sys

from lintler.cli import main

sys.exit(main())
