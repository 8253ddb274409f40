"""Password hashing interface - domain service abstraction.

The domain cares that passwords must be:
1. Hashed before storage, with a fresh salt every time
2. Verifiable later against the stored record alone

The domain does NOT care which key stretching function, random source or
library produces the record. Callers (an authentication service, a user
repository) depend on this abstraction and persist the returned string.
"""

from abc import ABC, abstractmethod


class IPasswordHasher(ABC):
    """
    Interface for password hashing operations.

    Implementations must be cryptographically secure, generate a unique salt
    per hash, and embed everything needed for verification in the record.
    """

    @abstractmethod
    def create_hash(self, password: str) -> str:
        """
        Hash a plain text password.

        Args:
            password: The plain text password to hash

        Returns:
            Encoded record containing the parameters, the salt and the derived key

        Example:
            hasher = SomePasswordHasher()
            record = hasher.create_hash("my_password")
            # record might be: "1000:9f86d081884c7d65...:2c26b46b68ffc68f..."
        """
        pass

    @abstractmethod
    def validate_password(self, password: str, record: str) -> bool:
        """
        Verify a plain text password against a stored record.

        Args:
            password: The plain text password to verify
            record: A record previously returned by create_hash

        Returns:
            True if password matches, False otherwise (including malformed records)

        Example:
            hasher = SomePasswordHasher()
            record = hasher.create_hash("my_password")

            hasher.validate_password("my_password", record)  # Returns: True
            hasher.validate_password("wrong_password", record)  # Returns: False
        """
        pass
