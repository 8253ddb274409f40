"""Named, process-wide secure random sources for salt generation.

Two families are available:

- ``system``: the operating system CSPRNG (``secrets.token_bytes``).
- ``SHA1PRNG``, ``SHA256PRNG``, ``SHA512PRNG``: HMAC_DRBG generators
  (NIST SP 800-90A, section 10.1.2) over the named digest. They are seeded
  from the operating system entropy pool and reseed themselves after
  ``RESEED_INTERVAL`` requests.

Sources are created lazily on first lookup and shared by every hasher in the
process. Each one serialises access to its internal state with a lock.
"""

import hashlib
import hmac
import logging
import os
import secrets
import threading
from collections.abc import Callable

from passhash.domain.exceptions import AlgorithmUnavailableException
from passhash.domain.services.random_source import IRandomSource

logger = logging.getLogger(__name__)

SYSTEM_ALGORITHM = "system"

DRBG_DIGESTS = {
    "SHA1PRNG": "sha1",
    "SHA256PRNG": "sha256",
    "SHA512PRNG": "sha512",
}


class SystemRandomSource(IRandomSource):
    """Random bytes straight from the operating system CSPRNG."""

    @property
    def algorithm(self) -> str:
        return SYSTEM_ALGORITHM

    def next_bytes(self, size: int) -> bytes:
        return secrets.token_bytes(size)


class HmacDrbgRandomSource(IRandomSource):
    """
    HMAC_DRBG deterministic random bit generator.

    Output is fully determined by the entropy it is seeded with, so tests may
    pass a fixed ``entropy`` callable. In production the default draws from
    ``os.urandom``.

    Usage:
        source = HmacDrbgRandomSource("SHA256PRNG", "sha256")
        salt = source.next_bytes(24)
    """

    RESEED_INTERVAL = 1 << 16

    def __init__(
        self,
        algorithm: str,
        digest: str,
        entropy: Callable[[int], bytes] = os.urandom,
    ):
        self._algorithm = algorithm
        self._digest = digest
        self._entropy = entropy
        self._lock = threading.Lock()

        try:
            outlen = hashlib.new(digest).digest_size
        except ValueError as e:
            raise AlgorithmUnavailableException(
                f"Digest '{digest}' required by {algorithm} is not available"
            ) from e

        # Entropy input plus nonce, as recommended for the security strength
        self._seed_size = outlen + outlen // 2
        self._key = b"\x00" * outlen
        self._value = b"\x01" * outlen
        self._update(self._entropy(self._seed_size))
        self._reseed_counter = 1

    @property
    def algorithm(self) -> str:
        return self._algorithm

    def _hmac(self, key: bytes, data: bytes) -> bytes:
        return hmac.new(key, data, self._digest).digest()

    def _update(self, provided_data: bytes = b"") -> None:
        self._key = self._hmac(self._key, self._value + b"\x00" + provided_data)
        self._value = self._hmac(self._key, self._value)
        if provided_data:
            self._key = self._hmac(self._key, self._value + b"\x01" + provided_data)
            self._value = self._hmac(self._key, self._value)

    def reseed(self) -> None:
        with self._lock:
            self._reseed()

    def _reseed(self) -> None:
        self._update(self._entropy(self._seed_size))
        self._reseed_counter = 1

    def next_bytes(self, size: int) -> bytes:
        if size < 0:
            raise ValueError(f"size must not be negative, got {size}")

        with self._lock:
            if self._reseed_counter > self.RESEED_INTERVAL:
                self._reseed()

            output = bytearray()
            while len(output) < size:
                self._value = self._hmac(self._key, self._value)
                output += self._value

            self._update()
            self._reseed_counter += 1
            return bytes(output[:size])


_sources: dict[str, IRandomSource] = {}
_sources_lock = threading.Lock()


def _create_random_source(algorithm: str) -> IRandomSource:
    if algorithm == SYSTEM_ALGORITHM:
        return SystemRandomSource()
    if algorithm in DRBG_DIGESTS:
        return HmacDrbgRandomSource(algorithm, DRBG_DIGESTS[algorithm])
    raise AlgorithmUnavailableException(
        f"Secure random algorithm '{algorithm}' is not supported. "
        f"Available: {', '.join(available_random_algorithms())}"
    )


def get_random_source(algorithm: str) -> IRandomSource:
    """
    Return the process-wide random source registered under ``algorithm``.

    Raises:
        AlgorithmUnavailableException: If no such algorithm is supported
    """
    with _sources_lock:
        source = _sources.get(algorithm)
        if source is None:
            source = _create_random_source(algorithm)
            _sources[algorithm] = source
            logger.info(f"Created secure random source '{algorithm}'")
        return source


def available_random_algorithms() -> list[str]:
    return [SYSTEM_ALGORITHM, *DRBG_DIGESTS]
