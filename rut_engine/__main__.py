"""
Entry point for running rut_engine as a module.

Usage:
    python -m rut_engine <command> [args]
"""

import sys

from .main import main

if __name__ == "__main__":
    sys.exit(main())
