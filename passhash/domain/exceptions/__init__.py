"""Domain exceptions - password hashing failures."""

from passhash.domain.exceptions.hashing_exceptions import (
    AlgorithmUnavailableException,
    InvalidConfigurationException,
    InvalidKeySpecException,
    MalformedHashRecordException,
    PasswordHashException,
)

__all__ = [
    "PasswordHashException",
    "AlgorithmUnavailableException",
    "InvalidKeySpecException",
    "InvalidConfigurationException",
    "MalformedHashRecordException",
]
