"""Main entry point for the Strata CLI.

Usage:
    python -m strata --help
    strata --help  # If installed via pip
"""

from strata.cli import main

if __name__ == "__main__":
    main()
