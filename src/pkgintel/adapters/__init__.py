"""Registry adapters."""

from pkgintel.adapters.base import BaseAdapter
from pkgintel.adapters.crates import CratesAdapter
from pkgintel.adapters.npm import NpmAdapter
from pkgintel.adapters.pypi import PyPiAdapter

__all__ = ["BaseAdapter", "CratesAdapter", "NpmAdapter", "PyPiAdapter"]
