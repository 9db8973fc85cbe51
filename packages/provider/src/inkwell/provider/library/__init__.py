"""外部图库检索 -- Wikimedia Commons / OpenClipart"""

from .base import LibraryBackend
from .openclipart import OpenClipartBackend
from .resolver import LibraryResolver, build_library_resolver
from .wikimedia import WikimediaBackend

__all__ = [
    "LibraryBackend",
    "LibraryResolver",
    "OpenClipartBackend",
    "WikimediaBackend",
    "build_library_resolver",
]
