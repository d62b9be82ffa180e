"""
subtyped CLI entry point.

Usage:
    python -m subtyped.cli list
    python -m subtyped.cli check <predicate> <json-value>
"""

import sys
from .main import main

if __name__ == "__main__":
    sys.exit(main())
