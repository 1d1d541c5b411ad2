"""Tests for read-only context views."""

import threading

import pytest

from scopectx.errors import ContextReleasedError, ErrorCategory, ReadOnlyContextError
from scopectx.views import ReadOnlyView, read_only, revoke, unwrap_view


class Point:
    def __init__(self, x, y):
        self.x = x
        self.y = y

    def norm1(self):
        return abs(self.x) + abs(self.y)


class TestReads:
    """Reads are forwarded to the wrapped object."""

    def test_attribute_and_method(self):
        """Attributes and bound methods resolve on the target."""
        view = ReadOnlyView(Point(3, -4))
        assert view.x == 3
        assert view.norm1() == 7

    def test_container_protocol(self):
        """Indexing, iteration, len and membership work."""
        view = ReadOnlyView({"a": 1, "b": 2})
        assert view["a"] == 1
        assert sorted(view) == ["a", "b"]
        assert len(view) == 2
        assert "b" in view

    def test_bool_and_equality(self):
        """Truthiness and equality follow the target."""
        assert not ReadOnlyView([])
        assert ReadOnlyView([1, 2]) == [1, 2]
        assert ReadOnlyView([1]) == ReadOnlyView([1])
        assert ReadOnlyView([1]) != [2]

    def test_hash_and_str(self):
        """Hashable targets stay hashable."""
        assert hash(ReadOnlyView("key")) == hash("key")
        assert str(ReadOnlyView(5)) == "5"
        assert repr(ReadOnlyView(5)) == "ReadOnlyView(5)"

    def test_missing_attribute(self):
        """Unknown attributes raise AttributeError like the target would."""
        with pytest.raises(AttributeError):
            ReadOnlyView(Point(0, 0)).z


class TestWrites:
    """Rebinding through the view is rejected."""

    def test_setattr(self):
        point = Point(1, 2)
        view = ReadOnlyView(point)
        with pytest.raises(ReadOnlyContextError):
            view.x = 10
        assert point.x == 1

    def test_delattr(self):
        with pytest.raises(ReadOnlyContextError):
            del ReadOnlyView(Point(1, 2)).x

    def test_setitem_and_delitem(self):
        data = {"a": 1}
        view = ReadOnlyView(data)
        with pytest.raises(ReadOnlyContextError):
            view["a"] = 2
        with pytest.raises(ReadOnlyContextError):
            del view["a"]
        assert data == {"a": 1}

    def test_error_is_attribute_error(self):
        """Callers catching AttributeError also catch view violations."""
        with pytest.raises(AttributeError) as exc_info:
            ReadOnlyView(Point(1, 2)).y = 0
        assert exc_info.value.category == ErrorCategory.OPERATION
        assert "with_mut_ref" in exc_info.value.suggested_action


class TestUnwrap:
    """unwrap_view returns the original object."""

    def test_unwrap_view(self):
        point = Point(1, 1)
        assert unwrap_view(ReadOnlyView(point)) is point

    def test_unwrap_plain_value(self):
        assert unwrap_view(42) == 42


class TestOperators:
    """Operators and conversions are forwarded to the target."""

    def test_arithmetic_and_reflected(self):
        view = ReadOnlyView([1, 2])
        assert view + [3] == [1, 2, 3]
        assert [0] + view == [0, 1, 2]
        assert view * 2 == [1, 2, 1, 2]

    def test_ordering(self):
        view = ReadOnlyView([1, 2])
        assert view < [1, 3]
        assert view >= [1, 2]
        assert ReadOnlyView([0]) < view

    def test_slices_and_reversed(self):
        view = ReadOnlyView([1, 2, 3])
        assert view[1:] == [2, 3]
        assert list(reversed(view)) == [3, 2, 1]

    def test_format_and_conversions(self):
        class Meters:
            def __init__(self, value):
                self.value = value

            def __format__(self, spec):
                return format(self.value, spec) + "m"

            def __int__(self):
                return int(self.value)

            def __float__(self):
                return float(self.value)

        view = ReadOnlyView(Meters(2.5))
        assert f"{view:.1f}" == "2.5m"
        assert int(view) == 2
        assert float(view) == 2.5

    def test_call_and_context_manager(self):
        lock = threading.Lock()
        view = ReadOnlyView(lock)
        with view:
            assert lock.locked()
        assert not lock.locked()
        assert ReadOnlyView(len)("abc") == 3


class TestReadOnlyHelper:
    """read_only only wraps values that can be changed in place."""

    @pytest.mark.parametrize("value", [5, 2.5, "s", b"b", (1, 2), frozenset({1}), None, True])
    def test_immutable_passed_through(self, value):
        assert read_only(value) is value

    @pytest.mark.parametrize("value", [[1], {"a": 1}, {1}, Point(0, 0)])
    def test_mutable_wrapped(self, value):
        view = read_only(value)
        assert isinstance(view, ReadOnlyView)
        assert unwrap_view(view) is value


class TestRevoke:
    """Revoked views refuse all access."""

    def test_revoked_view(self):
        view = ReadOnlyView({"a": 1})
        revoke(view)
        with pytest.raises(ContextReleasedError):
            view["a"]
        with pytest.raises(ContextReleasedError):
            len(view)
        with pytest.raises(ContextReleasedError):
            view + {}
        assert repr(view) == "ReadOnlyView(<released>)"

    def test_revoke_ignores_plain_values(self):
        revoke(5)
        revoke([1, 2])
