"""
Unit Tests for runtime type descriptors.
"""

from typing import Any

import pytest

from netapi.types import (
    ANY,
    BOOL,
    FLOAT,
    INT,
    NONE,
    STR,
    ListOf,
    MapOf,
    Primitive,
    Wrapper,
    as_descriptor,
    result_of,
    return_of,
)


class TestAsDescriptor:
    """Tests for converting type hints to descriptors."""

    @pytest.mark.parametrize(
        "hint, expected",
        [
            (str, STR),
            (int, INT),
            (float, FLOAT),
            (bool, BOOL),
            (Any, ANY),
            (object, ANY),
            (None, NONE),
            (type(None), NONE),
        ],
    )
    def test_primitives(self, hint, expected):
        """Should map plain types onto primitive descriptors."""
        assert as_descriptor(hint) == expected

    def test_bool_is_not_int(self):
        """bool must not collapse into int."""
        assert as_descriptor(bool) != as_descriptor(int)

    def test_nested_generics(self):
        """Should convert nested list/dict hints recursively."""
        descriptor = as_descriptor(dict[str, list[dict[str, int]]])

        assert descriptor == MapOf(STR, ListOf(MapOf(STR, INT)))

    def test_bare_containers_hold_any(self):
        """Unparameterised list and dict should hold any values."""
        assert as_descriptor(list) == ListOf(ANY)
        assert as_descriptor(dict) == MapOf(STR, ANY)

    def test_descriptor_passes_through(self):
        """A descriptor should be returned unchanged."""
        descriptor = Wrapper("Custom", ListOf(BOOL))
        assert as_descriptor(descriptor) is descriptor

    def test_unsupported_hint_raises(self):
        """Should reject hints without a JSON counterpart."""
        with pytest.raises(TypeError):
            as_descriptor(set[int])


class TestDescriptorNodes:
    """Tests for descriptor construction."""

    def test_unknown_primitive_kind_raises(self):
        with pytest.raises(ValueError):
            Primitive("decimal")

    def test_map_keys_limited_to_str_and_int(self):
        """JSON object keys can only be decoded as str or int."""
        MapOf(INT, STR)
        with pytest.raises(ValueError):
            MapOf(BOOL, STR)

    def test_str_renders_nested_shape(self):
        """Should render a readable nested shape for log messages."""
        descriptor = return_of(ListOf(MapOf(STR, result_of(INT))))
        assert str(descriptor) == "Return[List[Map[str, Result[int]]]]"

    def test_descriptors_compare_by_value(self):
        assert ListOf(MapOf(STR, INT)) == ListOf(MapOf(STR, INT))
        assert hash(ListOf(STR)) == hash(ListOf(STR))
