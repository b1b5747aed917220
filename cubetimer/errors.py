"""Errors raised by cubetimer."""


class CubeTimerError(Exception):
    """Base class for all cubetimer errors."""


class StoreError(CubeTimerError):
    """A solve store operation failed."""


class StoreWriteError(StoreError):
    """Creating or deleting solves failed."""


class StoreReadError(StoreError):
    """Querying the solve history failed."""
