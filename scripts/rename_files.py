#!/usr/bin/env python3
"""Prefix file names with the date they contain (yyyy-mm-dd <rest>).

Usage:
  PYTHONPATH=. python3 scripts/rename_files.py [--execute] [--debug] [DIR ...]

Dry run by default; see `--help` for all options.
"""

from __future__ import annotations

from dateprefix.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
