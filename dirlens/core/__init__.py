"""dirlens Core - Shared constants, errors and validators.

Import specific names from submodules:
    from dirlens.core.constants import EntryType, Limits
    from dirlens.core.errors import DirectoryReadError, WalkError
    from dirlens.core import validators
"""

# Re-export main module references for convenience
from dirlens.core import constants, errors, validators

__all__ = [
    "constants",
    "errors",
    "validators",
]
