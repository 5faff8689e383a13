#!/usr/bin/env python3
"""Entry point for the object store command-line tool."""
import sys

from objectstore_lib.cli import main

if __name__ == "__main__":
    sys.exit(main())
