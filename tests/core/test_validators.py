"""Tests for configuration validators."""

import pytest

from connfs.core.constants import ErrorCode
from connfs.core.validators import (
    ValidationError,
    validate_cache_config,
    validate_connection_config,
    validate_connection_name,
    validate_scheme,
)


class TestValidateScheme:
    """Tests for validate_scheme."""

    @pytest.mark.parametrize("scheme", ["pvfs", "s3", "my_scheme2"])
    def test_valid(self, scheme):
        """Test accepted schemes."""
        assert validate_scheme(scheme)

    @pytest.mark.parametrize("scheme", ["", "pv fs", "pvfs://", None, 3])
    def test_invalid(self, scheme):
        """Test rejected schemes."""
        with pytest.raises(ValidationError):
            validate_scheme(scheme)


class TestValidateConnectionName:
    """Tests for validate_connection_name."""

    def test_special_characters_allowed(self):
        """Test that names may contain almost anything."""
        assert validate_connection_name("Special Character name &#! <> why would you do this")

    @pytest.mark.parametrize("name", ["", None, "a/b", 12])
    def test_invalid(self, name):
        """Test rejected names."""
        with pytest.raises(ValidationError) as exc_info:
            validate_connection_name(name)
        assert exc_info.value.error_code == ErrorCode.INVALID_INPUT


class TestValidateConnectionConfig:
    """Tests for validate_connection_config."""

    def test_minimal(self):
        """Test the smallest valid entry."""
        assert validate_connection_config({"name": "conn", "type": "s3"})

    def test_full(self):
        """Test an entry with every field."""
        assert validate_connection_config(
            {
                "name": "conn",
                "type": "s3",
                "domain": "bucket",
                "has_buckets": True,
                "variables": {"a": 1},
                "transform": "legacy",
                "description": "text",
            }
        )

    def test_null_optionals(self):
        """Test that optional fields may be null."""
        assert validate_connection_config({"name": "conn", "type": "s3", "domain": None, "variables": None})

    @pytest.mark.parametrize(
        "entry,message",
        [
            ("not a dict", "dictionary"),
            ({"name": "conn"}, "type"),
            ({"name": "conn", "type": ""}, "type"),
            ({"name": "conn", "type": "s3", "domain": 5}, "domain"),
            ({"name": "conn", "type": "s3", "has_buckets": "yes"}, "has_buckets"),
            ({"name": "conn", "type": "s3", "variables": ["a"]}, "variables"),
            ({"name": "conn", "type": "s3", "transform": "magic"}, "transform"),
        ],
    )
    def test_invalid(self, entry, message):
        """Test rejected entries."""
        with pytest.raises(ValidationError, match=message):
            validate_connection_config(entry)


class TestValidateCacheConfig:
    """Tests for validate_cache_config."""

    def test_valid(self):
        """Test accepted settings."""
        assert validate_cache_config({})
        assert validate_cache_config({"enabled": False, "max_filesystems": 4, "ttl_seconds": 0.5})

    @pytest.mark.parametrize(
        "cache",
        [
            [],
            {"enabled": "yes"},
            {"max_filesystems": 0},
            {"max_filesystems": True},
            {"max_filesystems": 1.5},
            {"ttl_seconds": -1},
            {"ttl_seconds": "60"},
        ],
    )
    def test_invalid(self, cache):
        """Test rejected settings."""
        with pytest.raises(ValidationError):
            validate_cache_config(cache)
