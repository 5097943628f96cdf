class CardServiceError(Exception):
    """Base class for every error raised by the card template service."""


# Startup errors: the issuer never reaches the ready state.

class ConfigurationError(CardServiceError):
    """A required configuration value is missing or invalid."""


class SecretUnavailableError(CardServiceError):
    """The secret store could not be reached or the secret does not exist."""


class EmptySecretError(CardServiceError):
    """The secret exists but holds no value."""


class MalformedKeyError(CardServiceError):
    """The secret content is not a usable RSA private key.

    Messages carry the reason only, never the key material.
    """


# Per-call errors.

class InvalidReferenceError(CardServiceError):
    """A bucket name or object key is empty."""


class SigningError(CardServiceError):
    """The signed URL could not be produced."""


class NotReadyError(CardServiceError):
    """A signed URL was requested before the issuer finished initializing."""


class CardNotFoundError(CardServiceError):
    """No metadata exists for the requested card id."""


class StorageError(CardServiceError):
    """The object store or the metadata table rejected an operation."""
