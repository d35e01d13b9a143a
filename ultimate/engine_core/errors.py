"""
Engine errors.

Only programmer errors raise. Ignored moves are reported through
EventResult, and Board Service failures live in board_service.
"""


class ContractViolation(Exception):
    """Raised when a caller breaks the state machine's input contract."""

    def __init__(self, message: str, event=None):
        self.event = event
        super().__init__(message)
