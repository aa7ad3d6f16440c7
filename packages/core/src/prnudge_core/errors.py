"""Error taxonomy for a reminder run.

Every error is fatal to the run: nothing is retried and no per-PR isolation
is attempted. The CLI reports the first error's message and exits non-zero.
"""


class PrNudgeError(Exception):
    """Base class for all errors raised by prnudge."""


class ConfigurationError(PrNudgeError):
    """A required configuration value is missing or cannot be parsed."""


class TransportError(PrNudgeError):
    """A GitHub API call failed (network, auth, rate limit, not found)."""


class DataIntegrityError(PrNudgeError):
    """A record returned by GitHub is missing a field we depend on."""
