"""
Main entry point for running the package as a module.

Usage:
    python -m gallerygen photos/ gallery/ "Summer 2024"
    python -m gallerygen -s -j 4 photos/ gallery/
"""

import sys
from .cli import main

if __name__ == '__main__':
    sys.exit(main())
