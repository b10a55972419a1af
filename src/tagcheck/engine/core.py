"""Rule engine: walks a record and evaluates the rule expression of every field."""

import dataclasses
import logging
from collections.abc import Iterator, Mapping
from typing import Any

from pydantic import BaseModel

from ..config import TagConfig
from ..errors import AliasConflictError, FieldError, InvalidValidationError
from ..naming import NamingFunc, read_field_tags
from .builtins import BUILTIN_RULES, RuleFunc, is_empty
from .expression import DIVE, OMITEMPTY, SKIP, Token, TokenKind, parse_expression

logger = logging.getLogger(__name__)


def is_record(value: Any) -> bool:
    """True for dataclass and pydantic model instances."""
    if isinstance(value, type):
        return False
    return isinstance(value, BaseModel) or dataclasses.is_dataclass(value)


def iter_record_fields(record: Any) -> Iterator[tuple[str, Mapping[str, str], Any]]:
    """Yield ``(attribute, tags, value)`` in declaration order."""
    if isinstance(record, BaseModel):
        for attr, info in type(record).model_fields.items():
            yield attr, read_field_tags(info), getattr(record, attr)
    else:
        for fld in dataclasses.fields(record):
            yield fld.name, read_field_tags(fld), getattr(record, fld.name)


@dataclasses.dataclass
class _Location:
    namespace: str
    struct_namespace: str
    field: str
    struct_field: str

    def child(self, field: str, struct_field: str) -> "_Location":
        return _Location(
            f"{self.namespace}.{field}",
            f"{self.struct_namespace}.{struct_field}",
            field,
            struct_field,
        )

    def element(self, key: Any) -> "_Location":
        suffix = f"[{key}]"
        return _Location(
            self.namespace + suffix,
            self.struct_namespace + suffix,
            self.field + suffix,
            self.struct_field + suffix,
        )


class RuleEngine:
    """Evaluates field rule expressions against dataclass and pydantic records.

    Rules, aliases and the naming function form the rule set. Mutating it
    while an evaluation runs is not supported; configure first, then
    evaluate from any number of threads.
    """

    def __init__(self, tag_config: TagConfig | None = None):
        self.tag_config = tag_config or TagConfig()
        self._rules: dict[str, RuleFunc] = dict(BUILTIN_RULES)
        self._aliases: dict[str, str] = {}
        self._naming: NamingFunc | None = None
        self._parsed: dict[str, list[Token]] = {}

    def register_naming_func(self, func: NamingFunc) -> None:
        """Install the function computing display names from field tags."""
        self._naming = func

    def register_alias(self, name: str, expression: str) -> None:
        """Register ``name`` as shorthand for ``expression``.

        Raises:
            AliasConflictError: if ``name`` is already a rule or alias
        """
        if self.has_rule(name):
            raise AliasConflictError(name)
        self._aliases[name] = expression
        self._parsed.clear()
        logger.debug(f"Registered alias {name!r} = {expression!r}")

    def register_rule(self, name: str, func: RuleFunc) -> None:
        """Register a primitive rule predicate ``func(value, param) -> bool``.

        Raises:
            AliasConflictError: if ``name`` is already a rule or alias
        """
        if self.has_rule(name):
            raise AliasConflictError(name)
        self._rules[name] = func
        self._parsed.clear()
        logger.debug(f"Registered rule {name!r}")

    def has_rule(self, name: str) -> bool:
        """True if ``name`` is a registered rule, alias or keyword."""
        return name in self._rules or name in self._aliases or name in (OMITEMPTY, DIVE, SKIP)

    def aliases(self) -> dict[str, str]:
        return dict(self._aliases)

    def parse(self, expression: str) -> list[Token]:
        tokens = self._parsed.get(expression)
        if tokens is None:
            tokens = parse_expression(expression, self._aliases, self._rules)
            self._parsed[expression] = tokens
        return tokens

    def evaluate(self, record: Any) -> list[FieldError]:
        """Validate ``record`` and return every violation in evaluation order.

        Raises:
            InvalidValidationError: the record cannot be validated at all
        """
        if record is None:
            raise InvalidValidationError("validate: (nil)")
        if isinstance(record, type):
            raise InvalidValidationError(
                f"validate: expected a record instance, got class {record.__name__}", record
            )
        if not is_record(record):
            raise InvalidValidationError(
                f"validate: expected a dataclass or pydantic model, got {type(record).__name__}",
                type(record),
            )

        errors: list[FieldError] = []
        root = type(record).__name__
        self._walk(record, _Location(root, root, root, root), errors, set())
        return errors

    def _display_name(self, attr: str, field_tags: Mapping[str, str]) -> str:
        if self._naming is None:
            return attr
        return self._naming(field_tags) or attr

    def _walk(self, record: Any, loc: _Location, errors: list[FieldError], active: set[int]) -> None:
        if id(record) in active:
            return
        active.add(id(record))
        try:
            for attr, field_tags, value in iter_record_fields(record):
                expression = field_tags.get(self.tag_config.rule_tag, "")
                if expression == SKIP:
                    continue
                tokens = self.parse(expression) if expression else []
                child = loc.child(self._display_name(attr, field_tags), attr)
                self._check(value, tokens, child, errors, active)
        finally:
            active.discard(id(record))

    def _check(
        self,
        value: Any,
        tokens: list[Token],
        loc: _Location,
        errors: list[FieldError],
        active: set[int],
    ) -> None:
        for index, token in enumerate(tokens):
            if token.kind is TokenKind.OMITEMPTY:
                if is_empty(value):
                    return
            elif token.kind is TokenKind.DIVE:
                self._dive(value, tokens[index + 1:], loc, errors, active)
                return
            elif not any(self._rules[ref.name](value, ref.param) for ref in token.rules):
                errors.append(FieldError(
                    namespace=loc.namespace,
                    struct_namespace=loc.struct_namespace,
                    field=loc.field,
                    struct_field=loc.struct_field,
                    tag=token.tag,
                    actual_tag=token.actual_tag,
                    param=token.param,
                    value=value,
                ))
                return

        if is_record(value):
            self._walk(value, loc, errors, active)

    def _dive(
        self,
        value: Any,
        tokens: list[Token],
        loc: _Location,
        errors: list[FieldError],
        active: set[int],
    ) -> None:
        if value is None:
            return
        if isinstance(value, Mapping):
            items = value.items()
        elif isinstance(value, (list, tuple)):
            items = enumerate(value)
        else:
            raise InvalidValidationError(
                f"dive cannot be applied to {type(value).__name__} at {loc.struct_namespace}",
                type(value),
            )
        for key, element in items:
            self._check(element, tokens, loc.element(key), errors, active)
