"""PBKDF2 password hasher implementation using pwdlib.

This is the INFRASTRUCTURE side of IPasswordHasher. The domain interface
defines WHAT callers need (create_hash and validate_password); this class
defines HOW: PBKDF2 key stretching driven through pwdlib's PasswordHash.

Dependency flow:
    Authentication service -> IPasswordHasher (domain) <- Pbkdf2PasswordHasher

Records are self-describing, so the configuration can be tightened at any
time (more iterations, longer salts) without invalidating stored records.
"""

import logging
import threading
from collections.abc import Mapping
from typing import Any

from pwdlib import PasswordHash
from pwdlib.exceptions import UnknownHashError

from passhash.domain.services.password_hasher import IPasswordHasher
from passhash.domain.services.random_source import IRandomSource
from passhash.infrastructure.config.settings import (
    HasherConfig,
    HasherSettings,
    get_settings,
)
from passhash.infrastructure.security.pbkdf2_hasher import Pbkdf2Hasher

logger = logging.getLogger(__name__)


class Pbkdf2PasswordHasher(IPasswordHasher):
    """
    Production password hasher using PBKDF2 via pwdlib.

    Configuration (see HasherConfig):
    - Pseudorandom function: PBKDF2WithHmacSHA1 by default
    - Iterations: 1000 by default, stored in every record
    - Salt and derived key: 24 bytes each by default
    - Random source: the operating system CSPRNG by default

    The configuration and the pwdlib container built from it are held as one
    immutable snapshot. Each call reads the snapshot once, so hashing never
    observes a half-applied reconfiguration. Reconfiguration itself is
    serialised by a lock.

    Usage:
        hasher = Pbkdf2PasswordHasher()

        record = hasher.create_hash("user_password_123")
        # Returns: "1000:<48 hex chars>:<48 hex chars>"

        hasher.validate_password("user_password_123", record)  # True
        hasher.validate_password("wrong_password", record)  # False
    """

    def __init__(
        self,
        config: HasherConfig | None = None,
        random_source: IRandomSource | None = None,
        max_iterations: int | None = None,
    ):
        """
        Initialize the hasher.

        Args:
            config: Hasher parameters (defaults when omitted)
            random_source: Salt generator overriding the named
                secure_random_algorithm, e.g. a deterministic source in tests
            max_iterations: Reject records claiming more iterations than this
                before deriving anything; set it when records are untrusted
        """
        self._random_source = random_source
        self._max_iterations = max_iterations
        self._config_lock = threading.Lock()
        self._state = self._build_state(config or HasherConfig())

    @classmethod
    def from_settings(
        cls,
        settings: HasherSettings | None = None,
        random_source: IRandomSource | None = None,
    ) -> "Pbkdf2PasswordHasher":
        """Build a hasher from environment settings (PASSWORD_HASH_*)."""
        settings = settings or get_settings()
        return cls(settings.to_config(), random_source=random_source)

    def _build_state(self, config: HasherConfig) -> tuple[HasherConfig, PasswordHash]:
        hasher = Pbkdf2Hasher(
            config,
            random_source=self._random_source,
            max_iterations=self._max_iterations,
        )
        return config, PasswordHash((hasher,))

    def _apply(self, config: HasherConfig) -> None:
        self._state = self._build_state(config)
        logger.debug(
            f"Hasher configured: algorithm={config.pbkdf2_algorithm}, "
            f"iterations={config.pbkdf2_iterations}, "
            f"salt_bytes={config.salt_byte_size}, hash_bytes={config.hash_byte_size}, "
            f"random={config.secure_random_algorithm}"
        )

    def _update(self, **changes: Any) -> None:
        with self._config_lock:
            self._apply(self.config.replace(**changes))

    # === CONFIGURATION ===

    @property
    def config(self) -> HasherConfig:
        return self._state[0]

    def configure(self, properties: Mapping[str, Any]) -> None:
        """
        Override configuration from a property map.

        Recognised keys: hash-byte-size, salt-byte-size, pbkdf2-iterations,
        pbkdf2-algorithm, secure-random-algorithm. Other keys are ignored.
        On error the current configuration stays in effect.

        Raises:
            InvalidConfigurationException: If a numeric value is not a positive integer
        """
        with self._config_lock:
            self._apply(HasherConfig.from_properties(properties, base=self.config))

    @property
    def hash_byte_size(self) -> int:
        return self.config.hash_byte_size

    @hash_byte_size.setter
    def hash_byte_size(self, value: int) -> None:
        self._update(hash_byte_size=value)

    @property
    def salt_byte_size(self) -> int:
        return self.config.salt_byte_size

    @salt_byte_size.setter
    def salt_byte_size(self, value: int) -> None:
        self._update(salt_byte_size=value)

    @property
    def pbkdf2_iterations(self) -> int:
        return self.config.pbkdf2_iterations

    @pbkdf2_iterations.setter
    def pbkdf2_iterations(self, value: int) -> None:
        self._update(pbkdf2_iterations=value)

    @property
    def pbkdf2_algorithm(self) -> str:
        return self.config.pbkdf2_algorithm

    @pbkdf2_algorithm.setter
    def pbkdf2_algorithm(self, value: str) -> None:
        self._update(pbkdf2_algorithm=value)

    @property
    def secure_random_algorithm(self) -> str:
        return self.config.secure_random_algorithm

    @secure_random_algorithm.setter
    def secure_random_algorithm(self, value: str) -> None:
        self._update(secure_random_algorithm=value)

    # === HASHING ===

    def create_hash(self, password: str) -> str:
        """
        Hash a plain text password with a fresh salt.

        Args:
            password: The plain text password (encoded as UTF-8; lone
                surrogates are kept via the surrogatepass error handler)

        Returns:
            Record "<iterations>:<salt hex>:<key hex>"

        Raises:
            AlgorithmUnavailableException: Unknown pseudorandom function or random source
            InvalidKeySpecException: Derived key length not achievable

        Note:
            Each call draws a new salt, so hashing the same password twice
            produces different records (this is correct behavior).
        """
        config, password_hash = self._state
        record = password_hash.hash(password)
        logger.debug(
            f"Created password hash with {config.pbkdf2_algorithm}, "
            f"{config.pbkdf2_iterations} iterations"
        )
        return record

    def validate_password(self, password: str, record: str) -> bool:
        """
        Verify a plain text password against a stored record.

        The iteration count, salt and key length come from the record, so
        records created under older configurations still validate.

        Args:
            password: The plain text password to verify
            record: The stored record to check against

        Returns:
            True if the password matches, False otherwise. Malformed records
            and records beyond max_iterations return False instead of raising.

        Raises:
            AlgorithmUnavailableException: Unknown pseudorandom function
            InvalidKeySpecException: Embedded key length not achievable
        """
        if not isinstance(record, (str, bytes)):
            logger.warning("Rejected password hash record that is not a string")
            return False

        _, password_hash = self._state
        try:
            return password_hash.verify(password, record)
        except UnknownHashError:
            logger.warning("Rejected malformed password hash record")
            return False

    def validate_and_update(self, password: str, record: str) -> tuple[bool, str | None]:
        """
        Verify a password and upgrade an outdated record.

        Returns:
            (is_valid, new_record). new_record is a fresh record under the
            current configuration when the password matched but the stored
            record used different parameters; None otherwise.
        """
        if not isinstance(record, (str, bytes)):
            return False, None

        _, password_hash = self._state
        try:
            return password_hash.verify_and_update(password, record)
        except UnknownHashError:
            logger.warning("Rejected malformed password hash record")
            return False, None

    def needs_rehash(self, record: str) -> bool:
        """Check whether a record was produced under different parameters."""
        if not isinstance(record, (str, bytes)):
            return True

        _, password_hash = self._state
        return password_hash.current_hasher.check_needs_rehash(record)
