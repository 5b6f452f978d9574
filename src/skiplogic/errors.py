"""
Error taxonomy for the skip-logic engine.

Every failure here is a programmer or configuration fault. Nothing is
retried. Absent answers are NOT errors: they follow the default-visibility
rules of the evaluator.
"""


class SkipLogicError(Exception):
    """Base class for all skiplogic errors."""
    pass


class ReservedKeyError(SkipLogicError, ValueError):
    """Raised when an attribute write targets a reserved QuestionState key."""
    pass


class NumericFormatError(SkipLogicError, ValueError):
    """Raised when an ordered comparison operand is not a decimal number."""
    pass


class MissingHandlerError(SkipLogicError):
    """Raised when a required collaborator (handler) was never configured."""
    pass


class NotInitializedError(SkipLogicError):
    """Raised when the question filter is used before init_filter()."""
    pass


class AnswerTypeError(SkipLogicError, TypeError):
    """Raised on a wrong-variant Answer accessor or an unsupported value."""
    pass


class DefinitionError(SkipLogicError, ValueError):
    """Raised when survey definition data is malformed."""
    pass


__all__ = [
    "SkipLogicError",
    "ReservedKeyError",
    "NumericFormatError",
    "MissingHandlerError",
    "NotInitializedError",
    "AnswerTypeError",
    "DefinitionError",
]
