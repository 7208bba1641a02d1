"""
Package entry point.

Allows running the application via:

    python -m catalogflat

This simply forwards execution to catalogflat.cli.main().
"""

from catalogflat.cli import main

if __name__ == "__main__":
    main()
