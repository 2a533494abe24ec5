import sys

from archgen.cli import main

sys.exit(main())
