"""Allow ``python -m mindshare``."""

import sys

from mindshare.cli import main

sys.exit(main())
