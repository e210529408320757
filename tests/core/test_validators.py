"""Tests for dirlens.core.validators."""

import pytest

from dirlens.core.constants import DEFAULT_CONFIG, ErrorCode
from dirlens.core.validators import (
    ValidationError,
    validate_entry_name,
    validate_listing_config,
)


class TestValidateListingConfig:
    """Tests for validate_listing_config."""

    def test_defaults_are_valid(self):
        assert validate_listing_config(DEFAULT_CONFIG["listing"]) is True

    def test_empty_section_is_valid(self):
        assert validate_listing_config({}) is True

    def test_not_a_dict(self):
        with pytest.raises(ValidationError, match="dictionary"):
            validate_listing_config(["recursive"])

    def test_unknown_field(self):
        with pytest.raises(ValidationError, match="Unknown listing configuration fields: colour"):
            validate_listing_config({"colour": True})

    @pytest.mark.parametrize("key", ["include_hidden", "recursive", "disk_usage", "follow_symlinks"])
    def test_boolean_fields(self, key):
        with pytest.raises(ValidationError, match="must be boolean"):
            validate_listing_config({key: "yes"})

    def test_ignore_must_be_list(self):
        with pytest.raises(ValidationError, match="must be a list"):
            validate_listing_config({"ignore": ".git"})

    def test_ignore_names_are_validated(self):
        with pytest.raises(ValidationError, match="Invalid name in ignore_recursive"):
            validate_listing_config({"ignore_recursive": ["node_modules", "a/b"]})

    @pytest.mark.parametrize("workers", [0, -1, True, "4", 1.5])
    def test_invalid_max_workers(self, workers):
        with pytest.raises(ValidationError, match="max_workers"):
            validate_listing_config({"max_workers": workers})

    def test_valid_max_workers(self):
        assert validate_listing_config({"max_workers": 8}) is True
        assert validate_listing_config({"max_workers": None}) is True

    def test_format_must_be_string(self):
        with pytest.raises(ValidationError, match="format"):
            validate_listing_config({"format": 3})

    def test_error_code(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_listing_config({"recursive": 1})
        assert exc_info.value.error_code == ErrorCode.INVALID_INPUT


class TestValidateEntryName:
    """Tests for validate_entry_name."""

    @pytest.mark.parametrize("name", ["node_modules", ".git", "a b", "ünïcode"])
    def test_valid(self, name):
        assert validate_entry_name(name) is True

    @pytest.mark.parametrize("name", ["", ".", "..", "a/b", "nul\0byte"])
    def test_invalid(self, name):
        with pytest.raises(ValidationError):
            validate_entry_name(name)

    def test_non_string(self):
        with pytest.raises(ValidationError, match="must be string"):
            validate_entry_name(42)
