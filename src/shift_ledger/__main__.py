"""Entry point for ``python -m shift_ledger``."""

import sys

from shift_ledger.cli import main

if __name__ == "__main__":
    sys.exit(main())
