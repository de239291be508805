#!/usr/bin/env python
"""
Rebuild public/table.html and public/table/index.html from the existing
snapshot without touching the API.

Usage:
    python scripts/build_table_from_snapshot.py
    python scripts/build_table_from_snapshot.py --output ./public
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from customs_fx.main import main

if __name__ == "__main__":
    sys.exit(main(["table", *sys.argv[1:]]))
