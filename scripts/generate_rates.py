#!/usr/bin/env python
"""
Generate public/exchange-rates.json and the latest-week table.

Usage:
    python scripts/generate_rates.py
    python scripts/generate_rates.py --weeks 4 --output ./public
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from customs_fx.main import main

if __name__ == "__main__":
    sys.exit(main(["generate", *sys.argv[1:]]))
