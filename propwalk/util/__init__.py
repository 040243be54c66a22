"""
propwalk utility package.
Exposes file I/O and type checking helpers.
"""

from propwalk.util.error_handling import check_types
from propwalk.util.fileio import FileIO

__all__ = ["FileIO", "check_types"]
