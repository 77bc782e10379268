"""Allow running Blockfall with ``python -m blockfall``."""

import sys

from .cli import main

sys.exit(main())
