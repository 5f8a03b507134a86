"""
Package entry point.

Allows running the application via:

    python -m enrollcal

This simply forwards execution to enrollcal.cli.main().
"""

from enrollcal.cli import main

if __name__ == "__main__":
    main()
