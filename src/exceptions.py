"""Exception hierarchy for the payments engine.

Business-rule rejections are never raised; they are reported as
ProcessingResult values. Only conditions that stop a run (or a row) raise.
"""


class PaymentsError(Exception):
    """Base exception for all payments engine errors."""


class InputError(PaymentsError):
    """Raised when the transaction source cannot be read at all."""


class FixedDecimalError(PaymentsError, ValueError):
    """Raised when an amount string cannot be parsed."""


class AmountOverflowError(PaymentsError, ArithmeticError):
    """Raised when fixed-point arithmetic leaves the signed 64-bit range."""


class QueueClosedError(PaymentsError):
    """Raised when publishing to a queue that has been closed."""


class EngineError(PaymentsError):
    """Raised when the engine is used outside its single-run lifecycle."""


class ConfigurationError(PaymentsError):
    """Raised when configuration is invalid."""
