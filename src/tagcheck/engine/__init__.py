"""Rule engine evaluating per-field rule expressions over records."""

from .builtins import BUILTIN_RULES, RuleFunc, is_empty
from .core import RuleEngine, is_record, iter_record_fields
from .expression import RuleRef, Token, TokenKind, parse_expression

__all__ = [
    "BUILTIN_RULES",
    "RuleFunc",
    "is_empty",
    "RuleEngine",
    "is_record",
    "iter_record_fields",
    "RuleRef",
    "Token",
    "TokenKind",
    "parse_expression",
]
