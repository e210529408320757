"""dirlens - Directory listing with content classification.

Bulk directory reads, a recursive walker, magic-byte content sniffing and
concurrent assembly of per-entry metadata for terminal file managers.
"""

from dirlens.core.constants import DIRLENS_VERSION

__version__ = DIRLENS_VERSION

__all__ = ["__version__"]
