"""Entry point for python -m baes_sdk"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
