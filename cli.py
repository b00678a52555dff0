"""CLI entry point - wrapper for running from a source checkout"""

import sys

from cli.main import main

if __name__ == "__main__":
    sys.exit(main())
