"""
Run the command-line entry point.

    python -m browser_framework scan https://example.com --allow color-contrast
    python -m browser_framework show-config
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
