"""Registry intelligence for npm, PyPI and crates.io packages."""

__version__ = "0.1.0"
