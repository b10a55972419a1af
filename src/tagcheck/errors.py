"""Error taxonomy for tagcheck.

Three kinds of failure exist:

- field violations (``FieldError`` / ``FieldValidationError``), always
  collected and never aborting evaluation of the remaining fields
- structural errors (``InvalidValidationError``), raised when the target
  or its rule expressions cannot be evaluated at all
- misconfiguration (``AliasConflictError``), raised at registration time
"""

from dataclasses import dataclass
from typing import Any


class TagcheckError(Exception):
    """Base class for all tagcheck errors."""
    pass


@dataclass(frozen=True)
class FieldError:
    """A single rule failure reported by the rule engine."""
    namespace: str              # e.g. "Bar.values[1]", display names
    struct_namespace: str       # e.g. "Bar.values[1]", attribute names
    field: str                  # display name of the failing field/element
    struct_field: str           # attribute name of the failing field/element
    tag: str                    # rule name as written (alias name if aliased)
    actual_tag: str             # primitive rule that failed
    param: str = ""
    value: Any = None

    @property
    def detail(self) -> str:
        """Rule name with its parameter, e.g. ``oneof=a b``."""
        if self.param:
            return f"{self.actual_tag}={self.param}"
        return self.actual_tag

    def __str__(self) -> str:
        return f"{self.namespace}: {self.detail}"


class InvalidValidationError(TagcheckError):
    """Raised when the target cannot be evaluated (not a record, None, ...)."""

    def __init__(self, message: str, target_type: type | None = None):
        self.target_type = target_type
        super().__init__(message)


class UnknownRuleError(InvalidValidationError):
    """Raised when a rule expression references an unregistered rule."""

    def __init__(self, rule: str, expression: str = ""):
        self.rule = rule
        self.expression = expression
        message = f"undefined validation rule '{rule}'"
        if expression:
            message += f" in expression '{expression}'"
        super().__init__(message)


class InvalidExpressionError(InvalidValidationError):
    """Raised when a rule expression or parameter is malformed."""
    pass


class AliasConflictError(TagcheckError, ValueError):
    """Raised when an alias would shadow an existing rule or alias."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"validation rule or alias '{name}' is already registered")


class FieldValidationError(TagcheckError):
    """Human readable error for one violation: ``"<field>: <detail>"``."""

    def __init__(self, field: str, detail: str, violation: FieldError | None = None):
        self.field = field
        self.detail = detail
        self.violation = violation
        super().__init__(f"{field}: {detail}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldValidationError):
            return NotImplemented
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(str(self))

    def __repr__(self) -> str:
        return f"FieldValidationError({str(self)!r})"
