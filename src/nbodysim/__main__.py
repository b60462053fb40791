import sys

from nbodysim.cli import main

sys.exit(main())
