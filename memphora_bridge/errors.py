"""Error types surfaced to callers.

Nothing here is retried. Input problems and auth failures are raised as
soon as they are detected; transport failures from httpx propagate as-is.
"""


class MemphoraError(Exception):
    """Base error for the bridge."""


class InputError(MemphoraError):
    """Caller input is malformed or insufficient."""


class AuthenticationError(MemphoraError):
    """The Memphora API rejected the credentials, or none are configured."""
