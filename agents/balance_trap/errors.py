class TrapError(Exception):
    """Base class for balance trap failures."""


class NotAuthorizedError(TrapError):
    """Caller lacks the privilege an operation requires.

    The message is one of the fixed signals from ``agents.balance_trap.config``
    and is surfaced verbatim to callers.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(TrapError):
    pass
