"""Tests for built-in primitive rules."""

import time

import pytest

from tagcheck.engine.builtins import (
    BUILTIN_RULES,
    format_oneof_param,
    is_empty,
    parse_oneof_param,
)
from tagcheck.errors import InvalidExpressionError, InvalidValidationError


def check(rule, value, param=""):
    return BUILTIN_RULES[rule](value, param)


class TestIsEmpty:
    """Test the zero-value check shared by required and omitempty."""

    @pytest.mark.parametrize("value", [None, "", 0, 0.0, False, [], (), {}, set(), b""])
    def test_empty(self, value):
        """Test zero values are empty."""
        assert is_empty(value)

    @pytest.mark.parametrize("value", ["x", 1, -1, 0.5, True, [""], {"a": 1}, object()])
    def test_not_empty(self, value):
        """Test non-zero values are not empty."""
        assert not is_empty(value)


class TestOneof:
    """Test oneof and its parameter format."""

    def test_strings(self):
        """Test string membership."""
        assert check("oneof", "a", "a b")
        assert not check("oneof", "c", "a b")
        assert not check("oneof", "", "a b")

    def test_ints(self):
        """Test integers compared by their text."""
        assert check("oneof", 2, "1 2 3")
        assert not check("oneof", 4, "1 2 3")

    def test_quoted_values(self):
        """Test single quotes group values containing spaces."""
        assert parse_oneof_param("a 'b c' d") == ["a", "b c", "d"]
        assert check("oneof", "b c", "a 'b c'")

    def test_format_round_trip(self):
        """Test formatted values parse back unchanged."""
        values = ["small", "extra large"]
        assert format_oneof_param(values) == "small 'extra large'"
        assert parse_oneof_param(format_oneof_param(values)) == values

    def test_unsupported_type(self):
        """Test floats cannot be checked with oneof."""
        with pytest.raises(InvalidValidationError):
            check("oneof", 1.5, "1.5")


class TestSizeRules:
    """Size rules compare lengths for strings/collections and values for numbers."""

    @pytest.mark.parametrize("rule,value,param,expected", [
        ("min", "abc", "3", True),
        ("min", "ab", "3", False),
        ("max", [1, 2], "2", True),
        ("max", [1, 2, 3], "2", False),
        ("len", {"a": 1}, "1", True),
        ("min", 5, "5", True),
        ("min", 4.9, "5", False),
        ("max", 1.5, "1.5", True),
        ("gt", 2, "1", True),
        ("gt", 1, "1", False),
        ("gte", 1, "1", True),
        ("lt", "ab", "3", True),
        ("lte", "abcd", "3", False),
        ("eq", "abc", "abc", True),
        ("eq", 3, "3", True),
        ("eq", [1], "1", True),
        ("eq", True, "true", True),
        ("ne", "abc", "abd", True),
        ("ne", 3, "3", False),
    ])
    def test_rules(self, rule, value, param, expected):
        """Test size comparisons."""
        assert check(rule, value, param) is expected

    def test_bad_param(self):
        """Test non-numeric parameter is an expression error."""
        with pytest.raises(InvalidExpressionError):
            check("min", "abc", "three")

    def test_unsupported_type(self):
        """Test values without a size are rejected."""
        with pytest.raises(InvalidValidationError):
            check("min", object(), "1")


class TestStringRules:
    """Test string format rules."""

    @pytest.mark.parametrize("rule,value,expected", [
        ("alpha", "abc", True),
        ("alpha", "ab1", False),
        ("alphanum", "ab1", True),
        ("alphanum", "a b", False),
        ("numeric", "-1.5", True),
        ("numeric", "1e5", False),
        ("numeric", 12, True),
        ("number", "0012", True),
        ("number", "-1", False),
        ("number", 7, True),
        ("number", -7, True),
        ("number", 2.5, True),
        ("boolean", "true", True),
        ("boolean", "yes", False),
        ("boolean", False, True),
        ("lowercase", "abc", True),
        ("lowercase", "aBc", False),
        ("uppercase", "ABC", True),
        ("url", "https://tagcheck.io/path", True),
        ("url", "tagcheck.io", False),
        ("url", "file:///tmp/x", True),
        ("uuid", "6f1c2d9e-0c8b-4a67-9b0f-0f5c6b2b7d11", True),
        ("uuid", "not-a-uuid", False),
    ])
    def test_rules(self, rule, value, expected):
        """Test string formats."""
        assert check(rule, value) is expected

    @pytest.mark.parametrize("rule,param,value,expected", [
        ("contains", "lo", "hello", True),
        ("excludes", "lo", "hello", False),
        ("startswith", "he", "hello", True),
        ("endswith", "he", "hello", False),
    ])
    def test_substring_rules(self, rule, param, value, expected):
        """Test substring checks."""
        assert check(rule, value, param) is expected

    def test_non_string(self):
        """Test string rules reject other types."""
        with pytest.raises(InvalidValidationError):
            check("alpha", 123)


class TestEmail:
    """Test the email rule."""

    @pytest.mark.parametrize("value", ["user@tagcheck.io", "first.last@mail.tagcheck.io"])
    def test_valid(self, value):
        """Test well-formed addresses pass."""
        assert check("email", value)

    @pytest.mark.parametrize("value", [
        "user@",
        "plain",
        "a@b..c",
        "..@a.b",
        "a@b.c.",
        "two@@tagcheck.io",
        "",
    ])
    def test_invalid(self, value):
        """Test malformed addresses fail."""
        assert not check("email", value)


class TestHostname:
    """Test the hostname rule."""

    @pytest.mark.parametrize("value,expected", [
        ("web-01", True),
        ("web-01.tagcheck.io", True),
        ("a" * 63 + ".io", True),
        ("-web", False),
        ("1web", False),
        ("web-", False),
        ("web..io", False),
        ("web.", False),
        ("web_01", False),
        ("a" * 64, False),
        ("", False),
    ])
    def test_rules(self, value, expected):
        """Test host name labels."""
        assert check("hostname", value) is expected

    def test_long_invalid_value_is_fast(self):
        """Test long invalid names are rejected in linear time."""
        start = time.perf_counter()

        assert not check("hostname", "a" * 5000 + "!")
        assert not check("hostname", "a-" * 2500 + "!")

        assert time.perf_counter() - start < 1.0


class TestNetworkRules:
    """Test IP address and CIDR rules."""

    @pytest.mark.parametrize("rule,value,expected", [
        ("ip", "192.168.0.1", True),
        ("ip", "::1", True),
        ("ip", "300.0.0.1", False),
        ("ipv4", "192.168.0.1", True),
        ("ipv4", "::1", False),
        ("ipv6", "::1", True),
        ("ip4_addr", "10.0.0.1", True),
        ("ip6_addr", "10.0.0.1", False),
        ("cidr", "10.0.0.0/8", True),
        ("cidr", "10.0.0.0", False),
        ("cidrv4", "192.168.0.0/24", True),
        ("cidrv4", "fd00::/8", False),
        ("cidrv6", "fd00::/8", True),
    ])
    def test_rules(self, rule, value, expected):
        """Test address and network formats."""
        assert check(rule, value) is expected


class TestFileRules:
    """Test file and dir rules."""

    def test_file(self, tmp_path):
        """Test file accepts existing regular files only."""
        path = tmp_path / "data.txt"
        path.write_text("x", encoding="utf-8")

        assert check("file", str(path))
        assert not check("file", str(tmp_path))
        assert not check("file", str(tmp_path / "missing"))

    def test_dir(self, tmp_path):
        """Test dir accepts existing directories only."""
        assert check("dir", str(tmp_path))
        assert not check("dir", str(tmp_path / "missing"))
