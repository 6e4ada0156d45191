#!/usr/bin/env python3
"""
Market and portfolio tracking script.

Usage:
    python scripts/track.py                          # Statistics, coins, portfolio
    python scripts/track.py --search sol --sort price
    python scripts/track.py --set-holding bitcoin 0.25
    python scripts/track.py --detail ethereum --format json
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from cryptotracker.cli import main


if __name__ == '__main__':
    sys.exit(main())
