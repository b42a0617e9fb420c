#!/usr/bin/env python3
"""
run.py - Main entry point for the Connect Four chat bot
"""

import sys

from connect4bot.interfaces.cli import main

if __name__ == "__main__":
    sys.exit(main())
