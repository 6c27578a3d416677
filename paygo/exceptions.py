"""Business errors raised by the PayGo services.

Every error is terminal for the request that raised it. The HTTP layer maps
each class to a status code in ``web.app``.
"""


class PayGoError(Exception):
    """Base class for all PayGo business errors."""


class InvalidAmount(PayGoError, ValueError):
    """A numeric input is negative, non-finite or otherwise malformed."""


class EmptyEntrySet(PayGoError, ValueError):
    """A weekly record was submitted without any labour entries."""


class Forbidden(PayGoError, PermissionError):
    """The caller's role may not perform this operation."""


class Unauthorized(PayGoError, PermissionError):
    """The caller could not be identified, or the deletion secret is wrong."""


class StageOutOfOrder(PayGoError):
    """An approval stage was invoked before its prerequisite stage approved."""


class NotFound(PayGoError, LookupError):
    """The referenced record does not exist."""


class NotApproved(PayGoError):
    """A payment was attempted against a bill that is not fully approved."""


class OverpaymentRejected(PayGoError):
    """The payment would take the total paid above the bill's final amount."""


class DuplicateIdentifier(PayGoError):
    """A display number could not be allocated without collision."""


class DeletionBlocked(PayGoError):
    """The record has dependents and the delete policy refuses to remove it."""


class UnitBusy(PayGoError):
    """Another request holds the unit's lock for longer than the timeout."""


class DebitExceedsBaseWarning(UserWarning):
    """Stage debits exceed the base amount; the final amount was clamped to zero."""
