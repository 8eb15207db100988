"""Allow ``python -m topdrawer``."""
import sys

from topdrawer.cli import main

sys.exit(main())
