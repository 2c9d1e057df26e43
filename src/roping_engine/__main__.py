"""Allow ``python -m roping_engine``."""

import sys

from .cli import main

sys.exit(main())
