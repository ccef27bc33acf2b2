"""Main entry point when executing cliniccache as a package.

This allows running the package using python -m cliniccache.
"""

from cliniccache.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
