import sys

from weathersearch.cli import main

sys.exit(main())
