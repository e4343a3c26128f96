"""Run the p-variation CLI: python -m pvar <command> [args]"""

import sys

from pvar.cli import main

sys.exit(main())
