"""``python -m collate``"""

import sys

from collate.cli import main

if __name__ == "__main__":
    sys.exit(main())
