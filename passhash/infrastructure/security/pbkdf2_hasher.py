"""PBKDF2 hasher plugged into pwdlib.

pwdlib ships Argon2 and bcrypt hashers; this module adds PBKDF2 with the
``<iterations>:<salt hex>:<key hex>`` record format so that pwdlib's
``PasswordHash`` can drive it (hash, verify, verify_and_update) like any
other hasher.
"""

import hashlib

from pwdlib.hashers.base import HasherProtocol, validate_str_or_bytes

from passhash.domain.exceptions import (
    AlgorithmUnavailableException,
    InvalidKeySpecException,
    MalformedHashRecordException,
)
from passhash.domain.services.random_source import IRandomSource
from passhash.domain.value_objects.hash_record import HashRecord
from passhash.infrastructure.config.settings import HasherConfig
from passhash.infrastructure.security.random_sources import get_random_source

PRF_DIGESTS = {
    "PBKDF2WithHmacSHA1": "sha1",
    "PBKDF2WithHmacSHA224": "sha224",
    "PBKDF2WithHmacSHA256": "sha256",
    "PBKDF2WithHmacSHA384": "sha384",
    "PBKDF2WithHmacSHA512": "sha512",
}

# PBKDF2 produces at most (2^32 - 1) blocks of one digest each
MAX_BLOCKS = 2**32 - 1


def resolve_digest(algorithm: str) -> tuple[str, int]:
    """
    Map a pseudorandom function name to a hashlib digest name and size.

    Raises:
        AlgorithmUnavailableException: If the name is unknown or the runtime
            lacks the digest
    """
    digest = PRF_DIGESTS.get(algorithm)
    if digest is None:
        raise AlgorithmUnavailableException(
            f"Pseudorandom function '{algorithm}' is not supported. "
            f"Available: {', '.join(PRF_DIGESTS)}"
        )
    try:
        return digest, hashlib.new(digest).digest_size
    except ValueError as e:
        raise AlgorithmUnavailableException(
            f"Digest '{digest}' for {algorithm} is not available in this runtime"
        ) from e


def derive_key(
    algorithm: str, password: bytes, salt: bytes, iterations: int, key_size: int
) -> bytes:
    """
    Stretch ``password`` into ``key_size`` bytes with PBKDF2.

    Raises:
        AlgorithmUnavailableException: If the pseudorandom function is unsupported
        InvalidKeySpecException: If the key length or iteration count is unachievable
    """
    digest, digest_size = resolve_digest(algorithm)
    if key_size < 1 or key_size > MAX_BLOCKS * digest_size:
        raise InvalidKeySpecException(
            f"Derived key length {key_size} is not achievable with {algorithm}"
        )
    try:
        return hashlib.pbkdf2_hmac(digest, password, salt, iterations, dklen=key_size)
    except (ValueError, OverflowError) as e:
        raise InvalidKeySpecException(
            f"Cannot derive a {key_size} byte key with {iterations} iterations: {e}"
        ) from e


def encode_password(password: str | bytes) -> bytes:
    """
    Encode a password as UTF-8, passing lone surrogates through.

    Every Python str encodes, including ones with unpaired surrogates such as
    those produced by json.loads. Well-formed text encodes exactly as plain
    UTF-8, so stored records are unaffected. Bytes are used unchanged.
    """
    if isinstance(password, bytes):
        return password
    return password.encode("utf-8", "surrogatepass")


def constant_time_equals(a: bytes, b: bytes) -> bool:
    """
    Compare two byte strings in time independent of where they differ.

    A length mismatch is folded into the accumulated difference, and the
    loop always walks the full length of the shorter input.
    """
    diff = len(a) ^ len(b)
    for x, y in zip(a, b):
        diff |= x ^ y
    return diff == 0


class Pbkdf2Hasher(HasherProtocol):
    """
    PBKDF2 hasher following pwdlib's HasherProtocol.

    New records use the parameters of ``config``. Verification reads the
    iteration count, salt and key length from the record itself; only the
    pseudorandom function comes from ``config``.

    Usage:
        hasher = Pbkdf2Hasher(HasherConfig(pbkdf2_iterations=10))
        record = hasher.hash("my_password")
        hasher.verify("my_password", record)  # True
    """

    def __init__(
        self,
        config: HasherConfig | None = None,
        random_source: IRandomSource | None = None,
        max_iterations: int | None = None,
    ) -> None:
        """
        Args:
            config: Parameters for new records (defaults when omitted)
            random_source: Salt generator; when omitted the process-wide
                source named by ``config.secure_random_algorithm`` is used
            max_iterations: Records claiming more iterations fail verification
                without any key derivation (no limit when omitted)
        """
        self.config = config or HasherConfig()
        self._random_source = random_source
        self.max_iterations = max_iterations

    @classmethod
    def identify(cls, hash: str | bytes) -> bool:
        validate_str_or_bytes(hash, "hash")
        return HashRecord.matches(hash)

    @property
    def random_source(self) -> IRandomSource:
        """
        Salt generator in use, resolved lazily by name.

        Raises:
            AlgorithmUnavailableException: If the configured algorithm is unsupported
        """
        if self._random_source is not None:
            return self._random_source
        return get_random_source(self.config.secure_random_algorithm)

    def hash(self, password: str | bytes, *, salt: bytes | None = None) -> str:
        validate_str_or_bytes(password, "password")
        if salt is None:
            salt = self.random_source.next_bytes(self.config.salt_byte_size)

        derived_key = derive_key(
            self.config.pbkdf2_algorithm,
            encode_password(password),
            salt,
            self.config.pbkdf2_iterations,
            self.config.hash_byte_size,
        )
        record = HashRecord(
            iterations=self.config.pbkdf2_iterations,
            salt=salt,
            derived_key=derived_key,
        )
        return record.encode()

    def verify(self, password: str | bytes, hash: str | bytes) -> bool:
        validate_str_or_bytes(password, "password")
        validate_str_or_bytes(hash, "hash")
        try:
            record = HashRecord.decode(hash)
        except MalformedHashRecordException:
            return False

        if self.max_iterations is not None and record.iterations > self.max_iterations:
            return False

        candidate = derive_key(
            self.config.pbkdf2_algorithm,
            encode_password(password),
            record.salt,
            record.iterations,
            len(record.derived_key),
        )
        return constant_time_equals(candidate, record.derived_key)

    def check_needs_rehash(self, hash: str | bytes) -> bool:
        validate_str_or_bytes(hash, "hash")
        try:
            record = HashRecord.decode(hash)
        except MalformedHashRecordException:
            return True

        return (
            record.iterations != self.config.pbkdf2_iterations
            or len(record.salt) != self.config.salt_byte_size
            or len(record.derived_key) != self.config.hash_byte_size
        )
