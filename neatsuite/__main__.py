"""Main entry point when executing neatsuite as a package.

This allows running the package using python -m neatsuite.
"""

from neatsuite.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
