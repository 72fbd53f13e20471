"""Tests for variable spaces and substitution."""

import pytest

from conftest import JobContext
from connfs.context.variables import Variables, VariableSpace, context_items, substitute
from connfs.core.errors import VariableSubstitutionError


class TestContextItems:
    """Tests for context_items."""

    def test_none(self):
        """Test that no context reads as empty."""
        assert context_items(None) == {}

    def test_mapping(self):
        """Test reading a mapping."""
        assert context_items({"a": 1}) == {"a": 1}

    def test_variable_space(self):
        """Test reading any object with the variable-space interface."""
        assert context_items(JobContext({"a": 1, "b": 2})) == {"a": 1, "b": 2}

    def test_returns_copy(self):
        """Test that the result is independent of the source."""
        source = {"a": 1}
        items = context_items(source)
        items["b"] = 2
        assert source == {"a": 1}

    def test_rejects_other_objects(self):
        """Test that unsupported objects raise TypeError."""
        with pytest.raises(TypeError):
            context_items(["a", "b"])


class TestVariables:
    """Tests for the Variables container."""

    def test_protocol(self):
        """Test that Variables implements the variable-space interface."""
        assert isinstance(Variables(), VariableSpace)
        assert isinstance(JobContext({}), VariableSpace)

    def test_get_set_remove(self):
        """Test basic variable access."""
        variables = Variables()
        variables.set_variable("a", "1")
        assert variables.get_variable("a") == "1"
        assert "a" in variables
        variables.remove_variable("a")
        assert variables.get_variable("a", "default") == "default"
        variables.remove_variable("never-set")

    def test_inject_and_list(self):
        """Test bulk assignment."""
        variables = Variables({"a": 1})
        variables.inject({"b": 2, "c": 3})
        assert sorted(variables.list_variables()) == ["a", "b", "c"]
        assert len(variables) == 3
        assert sorted(variables) == ["a", "b", "c"]

    def test_copy_is_independent(self):
        """Test copy and with_variables."""
        original = Variables({"a": 1})
        derived = original.with_variables(b=2)
        assert "b" in derived
        assert "b" not in original
        assert original.copy() is not original

    def test_identity_equality(self):
        """Test that containers do not define value equality."""
        assert Variables({"a": 1}) != Variables({"a": 1})

    def test_from_context(self):
        """Test copying another context map."""
        variables = Variables.from_context(JobContext({"x": "y"}))
        assert variables.get_variable("x") == "y"

    def test_environment_substitute(self):
        """Test substitution through the container."""
        variables = Variables({"bucket": "sales", "env": "prod"})
        assert variables.environment_substitute("${bucket}-${env}") == "sales-prod"

    def test_repr(self):
        """Test string representation."""
        assert repr(Variables({"a": 1})) == "Variables({'a': 1})"


class TestSubstitute:
    """Tests for substitute."""

    def test_plain_text_unchanged(self):
        """Test text without references."""
        assert substitute("bucket", {"bucket": "x"}) == "bucket"
        assert substitute("", {}) == ""
        assert substitute(None, {}) is None

    def test_unknown_names_are_kept(self):
        """Test that unknown references stay verbatim."""
        assert substitute("${missing}/x", {}) == "${missing}/x"
        assert substitute("${a}-${b}", {"a": "1"}) == "1-${b}"

    def test_dotted_names(self):
        """Test dotted variable names."""
        assert substitute("${s3.bucket}", {"s3.bucket": "b"}) == "b"
        assert substitute("${s3.region}", {"s3.bucket": "b"}) == "${s3.region}"

    def test_dotted_name_under_plain_value(self):
        """Test that a dotted name whose prefix is a plain value is kept whole."""
        assert substitute("${a.b}", {"a": "x"}) == "${a.b}"
        assert substitute("${a}-${a.b.c}", {"a": "x"}) == "x-${a.b.c}"

    def test_dotted_names_in_nested_mappings(self):
        """Test walking nested mappings, with flat names taking precedence."""
        assert substitute("${s3.region}", {"s3": {"region": "eu"}}) == "eu"
        assert substitute("${s3.region}", {"s3": {"bucket": "b"}}) == "${s3.region}"
        assert substitute("${s3.region}", {"s3.region": "flat", "s3": {"region": "nested"}}) == "flat"

    def test_dotted_name_with_filter(self):
        """Test that filters apply to dotted names."""
        assert substitute("${s3.bucket | upper}", {"s3.bucket": "b"}) == "B"

    def test_non_string_values(self):
        """Test that values are rendered as text."""
        assert substitute("port-${port}", {"port": 8020}) == "port-8020"

    def test_variable_space_context(self):
        """Test substitution from a rich container."""
        assert substitute("${env}", JobContext({"env": "dev"})) == "dev"

    def test_invalid_expression(self):
        """Test that broken expressions raise VariableSubstitutionError."""
        with pytest.raises(VariableSubstitutionError) as exc_info:
            substitute("${ not valid ( }", {})
        assert exc_info.value.text == "${ not valid ( }"
