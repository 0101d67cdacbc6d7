"""Range compression and checksums.

The encoder and decoder live in `zonemapper.encoding.encoder` and
`zonemapper.encoding.decoder`; they depend on reconciliation, which in
turn depends on this package, so they are not re-exported here.
"""

from .ranges import compress, expand, expand_compressed
from .checksum import checksum

__all__ = [
    "compress",
    "expand",
    "expand_compressed",
    "checksum",
]
