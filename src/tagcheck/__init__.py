"""tagcheck - declarative validation for dataclass and pydantic records.

Fields carry rule expressions in their metadata; tagcheck evaluates every
field and reports all violations in declaration order.
"""

__version__ = "0.1.0"
__description__ = "Declarative field-tag validation for Python records"

from tagcheck.config import TagcheckConfig, TagConfig
from tagcheck.errors import (
    AliasConflictError,
    FieldError,
    FieldValidationError,
    InvalidExpressionError,
    InvalidValidationError,
    TagcheckError,
    UnknownRuleError,
)
from tagcheck.multierror import MultiError
from tagcheck.naming import resolve_field_name, tags
from tagcheck.validator import (
    Validator,
    new,
    register_collection_validator,
    struct,
    struct_with_multi_error,
)

__all__ = [
    "__version__",
    "__description__",
    "TagcheckConfig",
    "TagConfig",
    "AliasConflictError",
    "FieldError",
    "FieldValidationError",
    "InvalidExpressionError",
    "InvalidValidationError",
    "TagcheckError",
    "UnknownRuleError",
    "MultiError",
    "resolve_field_name",
    "tags",
    "Validator",
    "new",
    "register_collection_validator",
    "struct",
    "struct_with_multi_error",
]
