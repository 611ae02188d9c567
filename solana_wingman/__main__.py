"""
Entry point for `python -m solana_wingman`
"""

import sys

from .cli import main

sys.exit(main())
