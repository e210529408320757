"""
dirlens Core: Input Validators.

This module validates the listing configuration section and the names
placed on ignore lists before they reach the walker or the assembler.
"""
from typing import Any, Dict

from dirlens.core.constants import ConfigKey, ErrorCode


class ValidationError(Exception):
    """Base exception for validation errors."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        """Initialize ValidationError.

        Args:
            message: Error message
            error_code: Associated error code
        """
        super().__init__(message)
        self.error_code = error_code


_BOOLEAN_FIELDS = (
    ConfigKey.INCLUDE_FOLDERS,
    ConfigKey.INCLUDE_FILES,
    ConfigKey.INCLUDE_HIDDEN,
    ConfigKey.RECURSIVE,
    ConfigKey.DISK_USAGE,
    ConfigKey.FOLLOW_SYMLINKS,
)


def validate_listing_config(listing: Dict[str, Any]) -> bool:
    """Validate the ``listing`` configuration section.

    Args:
        listing: Listing configuration dictionary

    Returns:
        True if valid

    Raises:
        ValidationError: If the section is invalid
    """
    if not isinstance(listing, dict):
        raise ValidationError("Listing configuration must be a dictionary")

    valid_fields = set(_BOOLEAN_FIELDS) | {
        ConfigKey.IGNORE,
        ConfigKey.IGNORE_RECURSIVE,
        ConfigKey.MAX_WORKERS,
        ConfigKey.FORMAT,
    }
    unknown_fields = set(listing.keys()) - valid_fields
    if unknown_fields:
        raise ValidationError(
            f"Unknown listing configuration fields: {', '.join(sorted(unknown_fields))}"
        )

    for key in _BOOLEAN_FIELDS:
        if key in listing and not isinstance(listing[key], bool):
            raise ValidationError(f"Listing {key} must be boolean: {listing[key]}")

    for key in (ConfigKey.IGNORE, ConfigKey.IGNORE_RECURSIVE):
        if key in listing:
            names = listing[key]
            if not isinstance(names, list):
                raise ValidationError(f"Listing {key} must be a list")
            for name in names:
                try:
                    validate_entry_name(name)
                except ValidationError as e:
                    raise ValidationError(f"Invalid name in {key}: {e}")

    if listing.get(ConfigKey.MAX_WORKERS) is not None:
        workers = listing[ConfigKey.MAX_WORKERS]
        if isinstance(workers, bool) or not isinstance(workers, int) or workers <= 0:
            raise ValidationError(f"Listing max_workers must be positive integer: {workers}")

    if ConfigKey.FORMAT in listing and not isinstance(listing[ConfigKey.FORMAT], str):
        raise ValidationError("Listing format must be a string")

    return True


def validate_entry_name(name: str) -> bool:
    """Validate a single directory entry name.

    Args:
        name: Base name to validate

    Returns:
        True if valid

    Raises:
        ValidationError: If name is invalid
    """
    if not isinstance(name, str):
        raise ValidationError(f"Name must be string, got {type(name)}")

    if not name:
        raise ValidationError("Name cannot be empty")

    if name in (".", ".."):
        raise ValidationError(f"Name cannot be '{name}'")

    if "/" in name or "\0" in name:
        raise ValidationError(f"Name must be a single path component: {name!r}")

    return True
