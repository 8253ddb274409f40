"""Encoded hash record - the artifact callers persist.

Wire format (fixed, versionless)::

    <iterations>:<salt hex>:<derived key hex>

Salt and key are written as lowercase hexadecimal, two characters per byte.
Decoding accepts either case so records written by other tools still load.
"""

import re
from dataclasses import dataclass

from passhash.domain.exceptions import MalformedHashRecordException

DELIMITER = ":"

# Largest iteration count hashlib accepts
MAX_ITERATIONS = 2**31 - 1

RECORD_PATTERN = re.compile(
    r"(?P<iterations>[0-9]+)"
    r":(?P<salt>(?:[0-9a-fA-F]{2})+)"
    r":(?P<key>(?:[0-9a-fA-F]{2})+)"
)


@dataclass(frozen=True)
class HashRecord:
    """
    Decoded hash record: iteration count, salt and expected derived key.

    The record is self-describing. Verification reads the iteration count,
    the salt and the key length from here, never from current configuration.

    Verification cost is therefore chosen by whoever wrote the record: an
    untrusted record may claim up to ``MAX_ITERATIONS`` rounds, minutes of CPU
    for one check. Hashers accept a ``max_iterations`` ceiling for that case.
    """

    iterations: int
    salt: bytes
    derived_key: bytes

    def __post_init__(self):
        if not 1 <= self.iterations <= MAX_ITERATIONS:
            raise MalformedHashRecordException(
                f"Iteration count must be between 1 and {MAX_ITERATIONS}, got {self.iterations}"
            )
        if not self.salt:
            raise MalformedHashRecordException("Salt must not be empty")
        if not self.derived_key:
            raise MalformedHashRecordException("Derived key must not be empty")

    @classmethod
    def matches(cls, encoded: str | bytes) -> bool:
        """Check whether a string has the shape of an encoded record."""
        if isinstance(encoded, bytes):
            try:
                encoded = encoded.decode("ascii")
            except UnicodeDecodeError:
                return False
        return RECORD_PATTERN.fullmatch(encoded) is not None

    @classmethod
    def decode(cls, encoded: str | bytes) -> "HashRecord":
        """
        Parse an encoded record.

        Raises:
            MalformedHashRecordException: If the record does not split into three
                fields, the iteration count is not a positive decimal integer,
                or the salt/key are not even-length hexadecimal.
        """
        if isinstance(encoded, bytes):
            try:
                encoded = encoded.decode("ascii")
            except UnicodeDecodeError as e:
                raise MalformedHashRecordException("Record is not ASCII") from e

        if not isinstance(encoded, str):
            raise MalformedHashRecordException(
                f"Record must be str or bytes, got {type(encoded).__name__}"
            )

        match = RECORD_PATTERN.fullmatch(encoded)
        if match is None:
            raise MalformedHashRecordException(
                "Record must be '<iterations>:<salt hex>:<key hex>'"
            )

        return cls(
            iterations=int(match.group("iterations")),
            salt=bytes.fromhex(match.group("salt")),
            derived_key=bytes.fromhex(match.group("key")),
        )

    def encode(self) -> str:
        return DELIMITER.join(
            (str(self.iterations), self.salt.hex(), self.derived_key.hex())
        )

    def __str__(self) -> str:
        return self.encode()
