#!/usr/bin/env python3
"""
vosksrt Entry Point Script

This script initializes the CLI handler and runs a transcription session.
"""

import sys
from vosksrt.cli import main

if __name__ == "__main__":
    # Basic check for minimal Python version if necessary
    if sys.version_info < (3, 8):
        sys.stderr.write("vosksrt requires Python 3.8 or later.\n")
        sys.exit(1)

    main()
