"""Error hierarchy for session store access.

Read operations raise these. Mutations fold them into a MutationResult, where
``retryable`` mirrors whether the error is a TransientStoreError.
"""


class SchedulingError(Exception):
    """Base exception for all scheduling errors."""

    pass


class TransientStoreError(SchedulingError):
    """Temporary failure that may succeed on retry.

    Examples: network timeouts, connection resets, 5xx responses.
    """

    pass


class MutationRejectedError(SchedulingError):
    """The store refused the change; retrying the same request will not help.

    Examples: slot in the past, instructor double-booked, session already cancelled.
    """

    pass


class SessionNotFoundError(MutationRejectedError):
    """The referenced session does not exist in the store."""

    pass
