import sys

from nano_creator.cli import main

sys.exit(main())
