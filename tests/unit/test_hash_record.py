"""Unit tests for the encoded hash record.

Tests the persisted wire format:
1. Encoding as "<iterations>:<salt hex>:<key hex>"
2. Decoding, including tolerated variations
3. Rejection of malformed records
"""

import pytest

from passhash.domain.exceptions import MalformedHashRecordException
from passhash.domain.value_objects.hash_record import HashRecord

pytestmark = pytest.mark.unit


# === ENCODING TESTS ===


def test_encode_uses_lowercase_hex():
    """Test that salt and key are written as lowercase hex."""
    # Arrange
    record = HashRecord(iterations=1000, salt=b"\xab\xcd\x01", derived_key=b"\xff\x00")

    # Act
    encoded = record.encode()

    # Assert
    assert encoded == "1000:abcd01:ff00"
    assert str(record) == encoded


def test_encode_two_hex_characters_per_byte():
    """Test that every byte maps to exactly two characters."""
    # Arrange
    record = HashRecord(iterations=10, salt=bytes(24), derived_key=bytes(range(24)))

    # Act
    iterations, salt_hex, key_hex = record.encode().split(":")

    # Assert
    assert iterations == "10"
    assert salt_hex == "00" * 24
    assert len(key_hex) == 48


# === DECODING TESTS ===


def test_decode_valid_record():
    """Test decoding a well formed record."""
    # Act
    record = HashRecord.decode("1000:abcd01:ff00")

    # Assert
    assert record.iterations == 1000
    assert record.salt == b"\xab\xcd\x01"
    assert record.derived_key == b"\xff\x00"


def test_decode_accepts_uppercase_hex():
    """Test that uppercase hex decodes to the same bytes."""
    # Act
    record = HashRecord.decode("5:ABCD01:FF00")

    # Assert
    assert record == HashRecord(5, b"\xab\xcd\x01", b"\xff\x00")


def test_decode_tolerates_leading_zeros_in_iterations():
    """Test that '0010' is read as 10 iterations."""
    # Act
    record = HashRecord.decode("0010:00:00")

    # Assert
    assert record.iterations == 10


def test_decode_bytes_record():
    """Test that an ASCII bytes record decodes like a string."""
    # Act
    record = HashRecord.decode(b"7:0a:0b")

    # Assert
    assert record == HashRecord(7, b"\x0a", b"\x0b")


# === MALFORMED RECORD TESTS ===


@pytest.mark.parametrize(
    "encoded",
    [
        "",
        "1000",
        "1000:abcd",
        "1000:ab:cd:ef",
        "abc:ab:cd",
        "-10:ab:cd",
        "+10:ab:cd",
        " 10:ab:cd",
        "10:ab:cd\n",
        "0:ab:cd",
        "10::cd",
        "10:ab:",
        "10:abc:cd",
        "10:zz:cd",
        "10:ab cd:ef",
        "10;ab;cd",
        "١٠:ab:cd",
    ],
    ids=[
        "empty",
        "one-field",
        "two-fields",
        "four-fields",
        "non-numeric-iterations",
        "negative-iterations",
        "signed-iterations",
        "leading-space",
        "trailing-newline",
        "zero-iterations",
        "empty-salt",
        "empty-key",
        "odd-length-hex",
        "non-hex",
        "space-in-hex",
        "wrong-delimiter",
        "non-ascii-digits",
    ],
)
def test_decode_malformed_record_raises(encoded):
    """Test that malformed records raise MalformedHashRecordException."""
    # Act & Assert
    with pytest.raises(MalformedHashRecordException) as exc_info:
        HashRecord.decode(encoded)

    assert exc_info.value.error_code == "MALFORMED_HASH_RECORD"


def test_decode_non_ascii_bytes_raises():
    """Test that undecodable bytes are malformed, not a UnicodeDecodeError."""
    with pytest.raises(MalformedHashRecordException):
        HashRecord.decode(b"\xff\xfe:ab:cd")


def test_decode_non_string_raises():
    """Test that non-string input is malformed, not a TypeError."""
    with pytest.raises(MalformedHashRecordException):
        HashRecord.decode(12345)  # type: ignore[arg-type]


def test_record_rejects_zero_iterations():
    """Test that a record cannot be built with zero iterations."""
    with pytest.raises(MalformedHashRecordException):
        HashRecord(iterations=0, salt=b"\x00", derived_key=b"\x00")


def test_matches_reports_shape_only():
    """Test matches() for valid, invalid and bytes input."""
    assert HashRecord.matches("10:00:00") is True
    assert HashRecord.matches(b"10:00:00") is True
    assert HashRecord.matches("10:0:00") is False
    assert HashRecord.matches("$argon2id$v=19$m=65536,t=3,p=4$c2FsdA$aGFzaA") is False
    assert HashRecord.matches(b"\xff") is False


def test_decode_rejects_iterations_beyond_hashlib_limit():
    """Test that an absurd iteration count is malformed, not an overflow."""
    with pytest.raises(MalformedHashRecordException):
        HashRecord.decode("2147483648:ab:cd")
