#!/usr/bin/env python3
"""
run.py - Main entry point for connect4net
"""

import sys

from connect4net.interfaces.cli import main

if __name__ == "__main__":
    sys.exit(main())
