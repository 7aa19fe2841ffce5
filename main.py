"""Entry point for scanning the default cockpit screenshots."""
from __future__ import annotations

import sys

from rock_scanner.cli import main

if __name__ == "__main__":
    sys.exit(main())
