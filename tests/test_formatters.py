#
# PrettyRec - Formatters Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
from dataclasses import dataclass

# Third Party ----------------------------------------------------------------------------------------------------------
import pytest
from frozendict import frozendict

# Local ----------------------------------------------------------------------------------------------------------------
from prettyrec.formatters import fmt_type, fmt_value, _fmt_truncate


# Tests ----------------------------------------------------------------------------------------------------------------

class BrokenRepr:
    def __repr__(self):
        raise RuntimeError("boom")


@dataclass(frozen=True)
class AnyFrozen:
    a: int = 0


class TestFmtType:
    @pytest.mark.parametrize(
        "obj, expected",
        [
            pytest.param(42, "<int>", id="int"),
            pytest.param({}, "<dict>", id="dict"),
            pytest.param(frozendict(), "<frozendict>", id="frozendict"),
            pytest.param(AnyFrozen, "<AnyFrozen>", id="class"),
            pytest.param(AnyFrozen(), "<AnyFrozen>", id="instance"),
        ],
    )
    def test_basic(self, obj, expected):
        """Format types as angle-bracketed names."""
        assert fmt_type(obj) == expected

    def test_fully_qualified(self):
        """Qualify user types on request."""
        assert fmt_type(AnyFrozen(), fully_qualified=True) == f"<{__name__}.AnyFrozen>"


class TestFmtValue:
    @pytest.mark.parametrize(
        "obj, expected",
        [
            pytest.param(42, "<int: 42>", id="int"),
            pytest.param("ord=1,sem", "<str: 'ord=1,sem'>", id="str"),
            pytest.param(None, "<NoneType: None>", id="none"),
            pytest.param(AnyFrozen(), "<AnyFrozen: AnyFrozen(a=0)>", id="dataclass"),
        ],
    )
    def test_basic(self, obj, expected):
        """Format values as type and repr."""
        assert fmt_value(obj) == expected

    def test_truncate_str(self):
        """Long str reprs keep their closing quote."""
        assert fmt_value("x" * 100, max_repr=5) == "<str: 'xxxxx...'>"

    def test_truncate_other(self):
        """Long non-str reprs are cut with the ellipsis."""
        assert fmt_value(list(range(100)), max_repr=6, ellipsis="~") == "<list: [0, 1,~>"

    def test_broken_repr(self):
        """A failing __repr__ does not break the message."""
        assert fmt_value(BrokenRepr()) == "<BrokenRepr: <BrokenRepr object (repr failed: RuntimeError)>>"


class TestFmtTruncate:
    @pytest.mark.parametrize(
        "repr_, max_len, expected",
        [
            pytest.param("abc", 0, "", id="zero"),
            pytest.param("abc", 3, "abc", id="fits"),
            pytest.param("'abcd'", 4, "'abcd'", id="quoted-fits-content"),
            pytest.param("'abcdef'", 2, "'ab...'", id="quoted-cut"),
            pytest.param("abcdef", 2, "ab...", id="plain-cut"),
        ],
    )
    def test_truncate(self, repr_, max_len, expected):
        """Truncate reprs to the visible length."""
        assert _fmt_truncate(repr_, max_len) == expected
