"""Rule expression parsing.

An expression is a comma separated list of tokens evaluated left to right::

    "omitempty,min=3,max=10"
    "required,dive,oneof=a b"
    "ipv4|ipv6"

``0x2C`` and ``0x7C`` inside a parameter stand for ``,`` and ``|``.
Aliases are expanded in place when the expression is parsed.
"""

from collections.abc import Container, Mapping
from dataclasses import dataclass
from enum import Enum

from ..errors import InvalidExpressionError, UnknownRuleError

SKIP = "-"
OMITEMPTY = "omitempty"
DIVE = "dive"

_OR_SEPARATOR = "|"
_AND_SEPARATOR = ","
_PARAM_SEPARATOR = "="
_ESCAPES = {"0x2C": ",", "0x7C": "|"}


class TokenKind(str, Enum):
    """Kinds of expression tokens."""
    RULE = "rule"
    OMITEMPTY = "omitempty"
    DIVE = "dive"


@dataclass(frozen=True)
class RuleRef:
    """One primitive rule with its parameter and the name it was written as."""
    name: str
    param: str = ""
    tag: str = ""

    @property
    def text(self) -> str:
        if self.param:
            return f"{self.name}{_PARAM_SEPARATOR}{self.param}"
        return self.name


@dataclass(frozen=True)
class Token:
    """A parsed expression token. ``rules`` holds the OR alternatives of a RULE token."""
    kind: TokenKind
    rules: tuple[RuleRef, ...] = ()

    @property
    def tag(self) -> str:
        if len(self.rules) == 1:
            return self.rules[0].tag
        return _OR_SEPARATOR.join(r.tag for r in self.rules)

    @property
    def actual_tag(self) -> str:
        if len(self.rules) == 1:
            return self.rules[0].name
        return _OR_SEPARATOR.join(r.text for r in self.rules)

    @property
    def param(self) -> str:
        if len(self.rules) == 1:
            return self.rules[0].param
        return ""


def _unescape(param: str) -> str:
    for escaped, char in _ESCAPES.items():
        param = param.replace(escaped, char)
    return param


def parse_expression(
    expression: str,
    aliases: Mapping[str, str],
    rules: Container[str],
) -> list[Token]:
    """Parse ``expression`` into tokens, expanding aliases.

    Raises:
        UnknownRuleError: a token names neither a rule nor an alias
        InvalidExpressionError: the expression is malformed or aliases form a cycle
    """
    return _parse(expression, aliases, rules, expression, alias="", seen=())


def _parse(
    expression: str,
    aliases: Mapping[str, str],
    rules: Container[str],
    root: str,
    alias: str,
    seen: tuple[str, ...],
) -> list[Token]:
    tokens: list[Token] = []
    for raw in expression.split(_AND_SEPARATOR):
        if not raw:
            raise InvalidExpressionError(f"empty rule in expression '{root}'")
        if raw == OMITEMPTY:
            tokens.append(Token(TokenKind.OMITEMPTY))
        elif raw == DIVE:
            tokens.append(Token(TokenKind.DIVE))
        elif raw in aliases:
            tokens.extend(_expand_alias(raw, aliases, rules, root, seen))
        else:
            tokens.append(Token(TokenKind.RULE, _parse_group(raw, aliases, rules, root, alias, seen)))
    return tokens


def _expand_alias(
    name: str,
    aliases: Mapping[str, str],
    rules: Container[str],
    root: str,
    seen: tuple[str, ...],
) -> list[Token]:
    if name in seen:
        chain = " -> ".join(seen + (name,))
        raise InvalidExpressionError(f"alias cycle {chain} in expression '{root}'")
    return _parse(aliases[name], aliases, rules, root, alias=name, seen=seen + (name,))


def _parse_group(
    raw: str,
    aliases: Mapping[str, str],
    rules: Container[str],
    root: str,
    alias: str,
    seen: tuple[str, ...],
) -> tuple[RuleRef, ...]:
    group: list[RuleRef] = []
    for alternative in raw.split(_OR_SEPARATOR):
        name, _, param = alternative.partition(_PARAM_SEPARATOR)
        if not name:
            raise InvalidExpressionError(f"empty rule in expression '{root}'")
        if name in (OMITEMPTY, DIVE):
            raise InvalidExpressionError(f"'{name}' cannot be combined with '|' in expression '{root}'")
        if name in aliases and not param:
            # only single-rule aliases can take part in an OR group
            expanded = _expand_alias(name, aliases, rules, root, seen)
            if len(expanded) != 1 or expanded[0].kind is not TokenKind.RULE:
                raise InvalidExpressionError(
                    f"alias '{name}' cannot be used with '|' in expression '{root}'"
                )
            group.extend(expanded[0].rules)
            continue
        if name not in rules:
            raise UnknownRuleError(name, root)
        group.append(RuleRef(name, _unescape(param), alias or name))
    return tuple(group)
