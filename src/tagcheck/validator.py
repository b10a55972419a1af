"""Validator facade: display names, collection aliases, error translation and aggregation.

Usage:
    validator = Validator()
    validator.register_collection_validator("zone", "zones", ["is1a", "is1b", "tk1a"])

    errors = validator.struct_with_multi_error(server)
    if errors:
        for err in errors:
            print(err)
"""

import logging
import threading
from collections.abc import Callable, Sequence
from typing import Any

from .config import TagcheckConfig
from .engine import RuleEngine, RuleFunc
from .engine.builtins import format_oneof_param
from .errors import AliasConflictError, FieldError, FieldValidationError, InvalidValidationError
from .multierror import MultiError
from .naming import naming_func

logger = logging.getLogger(__name__)

FormatErrorFunc = Callable[[Any, FieldError], str]

_RESERVED_CHARS = (",", "|", "=")
_ESCAPE_SEQUENCES = ("0x2C", "0x7C")


def format_file_error(target: Any, err: FieldError) -> str:
    return f"invalid file path: {err.value}"


DEFAULT_FORMAT_ERROR_FUNCS: dict[str, FormatErrorFunc] = {
    "file": format_file_error,
}


def _escape_param(value: str) -> str:
    return value.replace(",", "0x2C").replace("|", "0x7C")


class Validator:
    """Validates records against their field rule tags and aggregates every violation.

    ``format_error_funcs`` maps a rule detail (``"required"`` or
    ``"oneof=a b"``) to a function building the message for that violation.
    It is looked up on every call, so entries may be added at any time.

    Register collection validators before the first ``struct`` call. The
    rule set is not locked against evaluations running concurrently.
    """

    def __init__(
        self,
        format_error_funcs: dict[str, FormatErrorFunc] | None = None,
        config: TagcheckConfig | None = None,
    ):
        self.format_error_funcs: dict[str, FormatErrorFunc] = dict(DEFAULT_FORMAT_ERROR_FUNCS)
        if format_error_funcs:
            self.format_error_funcs.update(format_error_funcs)
        self.config = config or TagcheckConfig()
        self._engine: RuleEngine | None = None
        self._init_lock = threading.Lock()

    @property
    def engine(self) -> RuleEngine:
        """The underlying rule engine, created on first access."""
        return self._init()

    def _init(self) -> RuleEngine:
        engine = self._engine
        if engine is not None:
            return engine
        with self._init_lock:
            if self._engine is None:
                engine = RuleEngine(self.config.tags)
                engine.register_naming_func(naming_func(self.config.tags))
                for key, func in DEFAULT_FORMAT_ERROR_FUNCS.items():
                    self.format_error_funcs.setdefault(key, func)
                self._engine = engine
                logger.debug("Initialized validator rule engine")
            return self._engine

    def register_collection_validator(
        self,
        singular_name: str,
        plural_name: str,
        allowed_values: Sequence[str],
    ) -> None:
        """Register a membership rule and its element-wise collection counterpart.

        ``("zone", "zones", ["is1a", "is1b"])`` registers:
          - ``zone``  as an alias of ``oneof=is1a is1b``
          - ``zones`` as an alias of ``dive,zone``

        Raises:
            ValueError: invalid names or allowed values
            AliasConflictError: either name is already registered
        """
        for name in (singular_name, plural_name):
            if not isinstance(name, str) or not name or any(c in name for c in _RESERVED_CHARS):
                raise ValueError(f"invalid rule name: {name!r}")
        if singular_name == plural_name:
            raise AliasConflictError(plural_name)

        values = list(allowed_values)
        if not values:
            raise ValueError(f"allowed values for '{singular_name}' must not be empty")
        for value in values:
            if (
                not isinstance(value, str)
                or not value
                or "'" in value
                or any(seq in value for seq in _ESCAPE_SEQUENCES)
            ):
                raise ValueError(f"invalid allowed value for '{singular_name}': {value!r}")

        engine = self._init()
        for name in (singular_name, plural_name):
            if engine.has_rule(name):
                raise AliasConflictError(name)

        param = _escape_param(format_oneof_param(values))
        engine.register_alias(singular_name, f"oneof={param}")
        engine.register_alias(plural_name, f"dive,{singular_name}")

    def register_rule(self, name: str, func: RuleFunc) -> None:
        """Register a custom primitive rule ``func(value, param) -> bool``."""
        self._init().register_rule(name, func)

    def translate(self, target: Any, violation: FieldError) -> FieldValidationError:
        """Convert an engine violation into ``"<name>: <detail>"``."""
        detail = violation.detail
        formatter = self.format_error_funcs.get(detail)
        if formatter is not None:
            detail = formatter(target, violation)

        actual_name = violation.namespace.split(".")[-1]
        return FieldValidationError(actual_name, detail, violation)

    def struct_with_multi_error(self, record: Any) -> MultiError | None:
        """Validate ``record`` and return every violation, or ``None`` if it is valid.

        A structural error (``InvalidValidationError``) is returned as the
        only entry of the result, never mixed with field violations.
        """
        engine = self._init()
        try:
            violations = engine.evaluate(record)
        except InvalidValidationError as e:
            return MultiError([e])

        errors = MultiError()
        for violation in violations:
            errors.append(self.translate(record, violation))
        return errors.error_or_none()

    def struct(self, record: Any) -> Exception | None:
        """Validate ``record`` and return a single error value, or ``None`` if it is valid.

        Field violations come back as a ``MultiError``; a structural error is
        returned as the ``InvalidValidationError`` itself.
        """
        errors = self.struct_with_multi_error(record)
        if errors is None:
            return None
        if len(errors) == 1 and isinstance(errors.errors[0], InvalidValidationError):
            return errors.errors[0]
        return errors

    def check(self, record: Any) -> None:
        """Raise the error ``struct`` would return."""
        err = self.struct(record)
        if err is not None:
            raise err


def new(
    format_error_funcs: dict[str, FormatErrorFunc] | None = None,
    config: TagcheckConfig | None = None,
) -> Validator:
    """Create a Validator with the built-in ``file`` formatter registered."""
    return Validator(format_error_funcs, config)


default_validator = Validator()


def register_collection_validator(
    singular_name: str,
    plural_name: str,
    allowed_values: Sequence[str],
) -> None:
    """Register a collection validator on the package default validator."""
    default_validator.register_collection_validator(singular_name, plural_name, allowed_values)


def struct(record: Any) -> Exception | None:
    """Validate ``record`` with the package default validator."""
    return default_validator.struct(record)


def struct_with_multi_error(record: Any) -> MultiError | None:
    """Validate ``record`` with the package default validator."""
    return default_validator.struct_with_multi_error(record)
