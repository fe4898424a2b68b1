import sys

from typing_drill.cli import main

if __name__ == "__main__":
    sys.exit(main())
