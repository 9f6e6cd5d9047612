"""Entry point for `python -m fretboard_master`."""

import sys

from fretboard_master.main import main

if __name__ == "__main__":
    sys.exit(main())
