"""Pool error classes.

Every error rejects the whole call: no reserve mutation and no
notification, except for the best-effort emergency sweep.
"""


class PoolError(Exception):
    """Base error for pool operations."""

    pass


class ZeroAmount(PoolError):
    """A required amount input was zero."""

    pass


class InvalidAmount(PoolError):
    """Amount is negative, not an integer, or exceeds uint256."""

    pass


class InsufficientAmount(PoolError):
    """Computed output amount rounded down to zero."""

    pass


class InsufficientLiquidity(PoolError):
    """Reserves are empty, would be fully drained, or are too small to withdraw from."""

    pass


class InvalidToken(PoolError):
    """Asset is neither of the pool's two configured assets."""

    pass


class TransferFailed(PoolError):
    """An asset ledger transfer did not succeed."""

    pass


class Unauthorized(PoolError):
    """Privileged operation invoked by a caller other than the authority."""

    pass


class ReentrantCall(PoolError):
    """A state-mutating operation was entered while another one was in progress."""

    pass
