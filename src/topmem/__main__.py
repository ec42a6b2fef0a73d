import sys

from topmem.cli import main

sys.exit(main())
