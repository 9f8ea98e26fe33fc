#!/usr/bin/env python3
"""Hospitality finance dashboard report builder.

Entry point script wrapping the package CLI for running from a checkout.

Usage:
    python build_dashboard.py --revenue revenue.xlsx --expenses expenses.xlsx -o report.json

For full documentation and options:
    python build_dashboard.py --help
"""

import sys
from pathlib import Path

# Add src to path for development installs
src_path = Path(__file__).parent / "src"
if src_path.exists():
    sys.path.insert(0, str(src_path))

from finance_dashboard.cli import main

if __name__ == "__main__":
    sys.exit(main())
