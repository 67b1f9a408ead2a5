"""tzlookup CLI entry point: python -m tzlookup"""

from __future__ import annotations

import sys

from tzlookup.cli import main

if __name__ == "__main__":
    sys.exit(main())
