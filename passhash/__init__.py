"""Salted, iterated PBKDF2 password hashing."""

from passhash.domain.exceptions import (
    AlgorithmUnavailableException,
    InvalidConfigurationException,
    InvalidKeySpecException,
    MalformedHashRecordException,
    PasswordHashException,
)
from passhash.domain.value_objects.hash_record import HashRecord
from passhash.infrastructure.config.settings import HasherConfig, HasherSettings
from passhash.infrastructure.security.pbkdf2_password_hasher import Pbkdf2PasswordHasher

__all__ = [
    "Pbkdf2PasswordHasher",
    "HasherConfig",
    "HasherSettings",
    "HashRecord",
    "PasswordHashException",
    "AlgorithmUnavailableException",
    "InvalidKeySpecException",
    "InvalidConfigurationException",
    "MalformedHashRecordException",
]
