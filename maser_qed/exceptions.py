"""Errors and warnings raised by the maser simulation."""


class MaserError(Exception):
    """Base class for all maser simulation errors."""


class InvalidParameterError(MaserError, ValueError):
    """Raised for non-physical inputs, rejected before integration starts."""


class IntegrationError(MaserError, RuntimeError):
    """Raised when the ODE solver fails or the state stops being finite.

    Attributes:
        last_time: Last time at which the state was still valid.
    """

    def __init__(self, message: str, last_time: float):
        super().__init__(f"{message} (last valid time t={last_time:g})")
        self.last_time = last_time


class GridMismatchWarning(UserWarning):
    """A coarse snapshot time has no counterpart on the fine time grid."""
