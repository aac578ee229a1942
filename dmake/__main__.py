# SPDX-License-Identifier: MIT
"""Allow running dmake as ``python -m dmake``."""

import sys

from dmake.cli import main

sys.exit(main())
