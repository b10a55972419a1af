"""Built-in primitive rules.

Every rule is a predicate ``(value, param) -> bool``. Size rules
(``len``, ``min``, ``max``, ``gt``, ...) compare the length of strings and
collections and the value itself for numbers. A rule applied to a value
type it cannot handle raises ``InvalidValidationError``.
"""

import ipaddress
import os
import re
import uuid
from collections.abc import Callable, Mapping
from typing import Any
from urllib.parse import urlparse

from email_validator import EmailNotValidError, validate_email

from ..errors import InvalidExpressionError, InvalidValidationError

RuleFunc = Callable[[Any, str], bool]

_ALPHA_RE = re.compile(r"^[a-zA-Z]+$")
_ALPHANUM_RE = re.compile(r"^[a-zA-Z0-9]+$")
_NUMERIC_RE = re.compile(r"^[-+]?[0-9]+(?:\.[0-9]+)?$")
_NUMBER_RE = re.compile(r"^[0-9]+$")
_HOSTNAME_LABEL_RE = re.compile(r"^[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?$")
_ONEOF_RE = re.compile(r"'[^']*'|\S+")

_TRUE_STRINGS = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE_STRINGS = {"0", "f", "F", "FALSE", "false", "False"}


def is_empty(value: Any) -> bool:
    """Zero-value test shared by ``required`` and ``omitempty``."""
    if value is None:
        return True
    if isinstance(value, (bool, int, float)):
        return not value
    if isinstance(value, (str, bytes)) or _is_collection(value):
        return len(value) == 0
    return False


def _is_collection(value: Any) -> bool:
    return isinstance(value, (list, tuple, set, frozenset, Mapping))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _number_param(param: str, rule: str) -> int | float:
    try:
        return int(param)
    except ValueError:
        pass
    try:
        return float(param)
    except ValueError:
        raise InvalidExpressionError(f"rule '{rule}' expects a numeric parameter, got '{param}'") from None


def _size(value: Any, rule: str) -> int | float:
    if _is_number(value):
        return value
    if isinstance(value, (str, bytes)) or _is_collection(value):
        return len(value)
    raise InvalidValidationError(f"rule '{rule}' cannot be applied to {type(value).__name__}", type(value))


def _text(value: Any, rule: str) -> str:
    if isinstance(value, str):
        return value
    raise InvalidValidationError(f"rule '{rule}' cannot be applied to {type(value).__name__}", type(value))


def parse_oneof_param(param: str) -> list[str]:
    """Split a ``oneof`` parameter; single quotes group values containing spaces."""
    return [v[1:-1] if v.startswith("'") and v.endswith("'") and len(v) > 1 else v
            for v in _ONEOF_RE.findall(param)]


def format_oneof_param(values: list[str]) -> str:
    """Inverse of ``parse_oneof_param``."""
    return " ".join(f"'{v}'" if re.search(r"\s", v) else v for v in values)


def required(value: Any, param: str) -> bool:
    return not is_empty(value)


def oneof(value: Any, param: str) -> bool:
    allowed = parse_oneof_param(param)
    if isinstance(value, str):
        return value in allowed
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value) in allowed
    raise InvalidValidationError(f"rule 'oneof' cannot be applied to {type(value).__name__}", type(value))


def eq(value: Any, param: str) -> bool:
    if isinstance(value, str):
        return value == param
    if isinstance(value, bool):
        if param in _TRUE_STRINGS:
            return value is True
        if param in _FALSE_STRINGS:
            return value is False
        raise InvalidExpressionError(f"rule 'eq' expects a boolean parameter, got '{param}'")
    return _size(value, "eq") == _number_param(param, "eq")


def ne(value: Any, param: str) -> bool:
    return not eq(value, param)


def length(value: Any, param: str) -> bool:
    return _size(value, "len") == _number_param(param, "len")


def minimum(value: Any, param: str) -> bool:
    return _size(value, "min") >= _number_param(param, "min")


def maximum(value: Any, param: str) -> bool:
    return _size(value, "max") <= _number_param(param, "max")


def gt(value: Any, param: str) -> bool:
    return _size(value, "gt") > _number_param(param, "gt")


def gte(value: Any, param: str) -> bool:
    return _size(value, "gte") >= _number_param(param, "gte")


def lt(value: Any, param: str) -> bool:
    return _size(value, "lt") < _number_param(param, "lt")


def lte(value: Any, param: str) -> bool:
    return _size(value, "lte") <= _number_param(param, "lte")


def alpha(value: Any, param: str) -> bool:
    return bool(_ALPHA_RE.match(_text(value, "alpha")))


def alphanum(value: Any, param: str) -> bool:
    return bool(_ALPHANUM_RE.match(_text(value, "alphanum")))


def numeric(value: Any, param: str) -> bool:
    if _is_number(value):
        return True
    return bool(_NUMERIC_RE.match(_text(value, "numeric")))


def number(value: Any, param: str) -> bool:
    if _is_number(value):
        return True
    return bool(_NUMBER_RE.match(_text(value, "number")))


def boolean(value: Any, param: str) -> bool:
    if isinstance(value, bool):
        return True
    text = _text(value, "boolean")
    return text in _TRUE_STRINGS or text in _FALSE_STRINGS


def lowercase(value: Any, param: str) -> bool:
    text = _text(value, "lowercase")
    return text != "" and text == text.lower()


def uppercase(value: Any, param: str) -> bool:
    text = _text(value, "uppercase")
    return text != "" and text == text.upper()


def contains(value: Any, param: str) -> bool:
    return param in _text(value, "contains")


def excludes(value: Any, param: str) -> bool:
    return param not in _text(value, "excludes")


def startswith(value: Any, param: str) -> bool:
    return _text(value, "startswith").startswith(param)


def endswith(value: Any, param: str) -> bool:
    return _text(value, "endswith").endswith(param)


def email(value: Any, param: str) -> bool:
    try:
        validate_email(_text(value, "email"), check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def url(value: Any, param: str) -> bool:
    parsed = urlparse(_text(value, "url"))
    if not parsed.scheme:
        return False
    if parsed.scheme == "file":
        return bool(parsed.path)
    return bool(parsed.netloc)


def hostname(value: Any, param: str) -> bool:
    """RFC 952 host name: dot separated labels, starting with a letter."""
    text = _text(value, "hostname")
    if not text[:1].isascii() or not text[:1].isalpha():
        return False
    return all(_HOSTNAME_LABEL_RE.fullmatch(label) for label in text.split("."))


def uuid_rule(value: Any, param: str) -> bool:
    try:
        uuid.UUID(_text(value, "uuid"))
    except ValueError:
        return False
    return True


def _ip(value: Any, rule: str, version: int | None = None) -> bool:
    try:
        address = ipaddress.ip_address(_text(value, rule))
    except ValueError:
        return False
    return version is None or address.version == version


def _cidr(value: Any, rule: str, version: int | None = None) -> bool:
    text = _text(value, rule)
    if "/" not in text:
        return False
    try:
        network = ipaddress.ip_network(text, strict=False)
    except ValueError:
        return False
    return version is None or network.version == version


def file(value: Any, param: str) -> bool:
    return os.path.isfile(_text(value, "file"))


def directory(value: Any, param: str) -> bool:
    return os.path.isdir(_text(value, "dir"))


BUILTIN_RULES: dict[str, RuleFunc] = {
    "required": required,
    "oneof": oneof,
    "eq": eq,
    "ne": ne,
    "len": length,
    "min": minimum,
    "max": maximum,
    "gt": gt,
    "gte": gte,
    "lt": lt,
    "lte": lte,
    "alpha": alpha,
    "alphanum": alphanum,
    "numeric": numeric,
    "number": number,
    "boolean": boolean,
    "lowercase": lowercase,
    "uppercase": uppercase,
    "contains": contains,
    "excludes": excludes,
    "startswith": startswith,
    "endswith": endswith,
    "email": email,
    "url": url,
    "hostname": hostname,
    "uuid": uuid_rule,
    "ip": lambda v, p: _ip(v, "ip"),
    "ipv4": lambda v, p: _ip(v, "ipv4", 4),
    "ipv6": lambda v, p: _ip(v, "ipv6", 6),
    "ip4_addr": lambda v, p: _ip(v, "ip4_addr", 4),
    "ip6_addr": lambda v, p: _ip(v, "ip6_addr", 6),
    "cidr": lambda v, p: _cidr(v, "cidr"),
    "cidrv4": lambda v, p: _cidr(v, "cidrv4", 4),
    "cidrv6": lambda v, p: _cidr(v, "cidrv6", 6),
    "file": file,
    "dir": directory,
}
