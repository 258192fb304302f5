#!/usr/bin/env python3
"""
Launch the Settlement Tool CLI
Usage:
    python run_cli.py import rows.csv --coords coords.csv -o site.json
    python run_cli.py report site.json --cycle 5
    python run_cli.py groups site.json
"""
import sys

from settlement_tool.cli.main import main

if __name__ == "__main__":
    sys.exit(main())
