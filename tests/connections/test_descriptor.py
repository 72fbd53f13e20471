"""Tests for connection descriptors."""

import pytest

from conftest import JobContext
from connfs.connections.details import ConnectionDescriptor
from connfs.core.validators import ValidationError
from connfs.uri.transform import TransformKind


class TestConnectionDescriptor:
    """Tests for ConnectionDescriptor."""

    def test_defaults(self):
        """Test default field values."""
        descriptor = ConnectionDescriptor(name="conn", type="s3")
        assert descriptor.domain == ""
        assert descriptor.has_buckets is False
        assert dict(descriptor.variables) == {}
        assert descriptor.transform is TransformKind.DEFAULT

    def test_none_domain_normalized(self):
        """Test that a None domain becomes empty."""
        assert ConnectionDescriptor(name="conn", type="s3", domain=None).domain == ""

    def test_immutable(self):
        """Test that descriptors cannot be changed."""
        descriptor = ConnectionDescriptor(name="conn", type="s3", variables={"a": 1})
        with pytest.raises(AttributeError):
            descriptor.domain = "other"
        with pytest.raises(TypeError):
            descriptor.variables["a"] = 2

    def test_variables_are_copied(self):
        """Test that later changes to the source dict do not leak in."""
        source = {"a": 1}
        descriptor = ConnectionDescriptor(name="conn", type="s3", variables=source)
        source["a"] = 2
        assert descriptor.variables["a"] == 1

    def test_hashable(self):
        """Test that descriptors can be used as dictionary keys."""
        first = ConnectionDescriptor(name="conn", type="s3", variables={"a": 1})
        second = ConnectionDescriptor(name="conn", type="s3", variables={"a": 1})
        assert {first: 1}[second] == 1

    def test_from_dict(self):
        """Test building from a configuration entry."""
        descriptor = ConnectionDescriptor.from_dict(
            {
                "name": "my reports",
                "type": "gs",
                "domain": "reports",
                "has_buckets": True,
                "variables": {"env": "dev"},
                "transform": "legacy",
                "description": "Reports",
            }
        )
        assert descriptor.name == "my reports"
        assert descriptor.type == "gs"
        assert descriptor.domain == "reports"
        assert descriptor.has_buckets is True
        assert descriptor.variables["env"] == "dev"
        assert descriptor.transform is TransformKind.LEGACY
        assert descriptor.description == "Reports"

    def test_from_dict_invalid(self):
        """Test that invalid entries are rejected."""
        with pytest.raises(ValidationError):
            ConnectionDescriptor.from_dict({"name": "a/b", "type": "s3"})
        with pytest.raises(ValidationError):
            ConnectionDescriptor.from_dict({"name": "conn"})

    def test_to_dict_round_trip(self):
        """Test that to_dict produces a valid entry for from_dict."""
        descriptor = ConnectionDescriptor(name="conn", type="s3", domain="b", variables={"x": "y"})
        assert ConnectionDescriptor.from_dict(descriptor.to_dict()) == descriptor


class TestResolveVariables:
    """Tests for ConnectionDescriptor.resolve_variables."""

    def test_uses_own_variables(self):
        """Test substitution from the descriptor's variables."""
        descriptor = ConnectionDescriptor(
            name="conn", type="s3", domain="sales-${env}", variables={"env": "dev"}
        )
        assert descriptor.resolve_variables().domain == "sales-dev"

    def test_context_overrides(self):
        """Test that request variables take precedence."""
        descriptor = ConnectionDescriptor(
            name="conn", type="s3", domain="sales-${env}", variables={"env": "dev"}
        )
        assert descriptor.resolve_variables({"env": "prod"}).domain == "sales-prod"
        assert descriptor.resolve_variables(JobContext({"env": "qa"})).domain == "sales-qa"

    def test_type_substitution(self):
        """Test that the type may also reference variables."""
        descriptor = ConnectionDescriptor(name="conn", type="${protocol}")
        assert descriptor.resolve_variables({"protocol": "gs"}).type == "gs"

    def test_unknown_names_kept(self):
        """Test that unresolved references stay visible."""
        descriptor = ConnectionDescriptor(name="conn", type="s3", domain="${bucket}")
        assert descriptor.resolve_variables().domain == "${bucket}"

    def test_original_unchanged(self):
        """Test that resolution returns a new descriptor."""
        descriptor = ConnectionDescriptor(name="conn", type="s3", domain="${b}")
        resolved = descriptor.resolve_variables({"b": "x"})
        assert resolved is not descriptor
        assert descriptor.domain == "${b}"
        assert resolved.name == "conn"
