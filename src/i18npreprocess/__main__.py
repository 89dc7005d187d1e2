"""Allow ``python -m i18npreprocess``."""

import sys

from i18npreprocess.cli import main

sys.exit(main())
