"""
Allow running the package directly: python -m brotview
"""
import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
