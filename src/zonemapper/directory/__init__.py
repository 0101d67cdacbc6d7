"""Master pincode directory and its loaders."""

from .master import MasterDirectory, coerce_pincode
from .cache import DirectoryCache
from .sources import DirectorySourceLoader, load_records

__all__ = [
    "MasterDirectory",
    "coerce_pincode",
    "DirectoryCache",
    "DirectorySourceLoader",
    "load_records",
]
