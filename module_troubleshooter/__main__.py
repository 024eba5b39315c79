#!/usr/bin/env python3
"""
Entry point for running module_troubleshooter as a module.
"""

import sys

from module_troubleshooter.cli import main

if __name__ == '__main__':
    sys.exit(main())
