"""Domain layer exceptions for password hashing failures."""


class PasswordHashException(Exception):
    """
    Base exception for the password hashing domain.

    Examples:
        - Unsupported pseudorandom function or random source
        - Unachievable derived key length
        - Malformed configuration values
    """

    def __init__(self, message: str, error_code: str = "PASSWORD_HASH_ERROR"):
        """
        Initialize password hashing exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
        """
        self.message = message
        self.error_code = error_code
        super().__init__(self.message)


class AlgorithmUnavailableException(PasswordHashException):
    """Raised when a pseudorandom function or random source is not supported."""

    def __init__(self, message: str):
        super().__init__(message, error_code="ALGORITHM_UNAVAILABLE")


class InvalidKeySpecException(PasswordHashException):
    """Raised when the requested derived key cannot be produced."""

    def __init__(self, message: str):
        super().__init__(message, error_code="INVALID_KEY_SPEC")


class InvalidConfigurationException(PasswordHashException):
    """Raised when a configuration value is malformed."""

    def __init__(self, message: str):
        super().__init__(message, error_code="INVALID_CONFIGURATION")


class MalformedHashRecordException(PasswordHashException):
    """
    Raised when an encoded hash record cannot be decoded.

    Validation never lets this escape: a malformed record is a non-match.
    """

    def __init__(self, message: str = "Malformed password hash record"):
        super().__init__(message, error_code="MALFORMED_HASH_RECORD")
