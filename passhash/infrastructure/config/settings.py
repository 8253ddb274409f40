"""Hasher configuration using pydantic and pydantic-settings."""

from collections.abc import Mapping
from functools import lru_cache
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from passhash.domain.exceptions import InvalidConfigurationException
from passhash.domain.value_objects.hash_record import MAX_ITERATIONS

# Property keys - the public configuration contract
PARAM_HASH_BYTE_SIZE = "hash-byte-size"
PARAM_SALT_BYTE_SIZE = "salt-byte-size"
PARAM_PBKDF2_ITERATIONS = "pbkdf2-iterations"
PARAM_PBKDF2_ALGORITHM = "pbkdf2-algorithm"
PARAM_SECURE_RANDOM_ALGORITHM = "secure-random-algorithm"

DEFAULT_HASH_BYTE_SIZE = 24
DEFAULT_SALT_BYTE_SIZE = 24
DEFAULT_PBKDF2_ITERATIONS = 1000
DEFAULT_PBKDF2_ALGORITHM = "PBKDF2WithHmacSHA1"
DEFAULT_SECURE_RANDOM_ALGORITHM = "system"

PROPERTY_KEYS = (
    PARAM_HASH_BYTE_SIZE,
    PARAM_SALT_BYTE_SIZE,
    PARAM_PBKDF2_ITERATIONS,
    PARAM_PBKDF2_ALGORITHM,
    PARAM_SECURE_RANDOM_ALGORITHM,
)

_NUMERIC_FIELDS = ("hash_byte_size", "salt_byte_size", "pbkdf2_iterations")


def _parse_positive_int(value: Any) -> Any:
    """Accept ints and plain decimal strings; leave the rest to pydantic."""
    if isinstance(value, bool):
        raise ValueError("must be a positive integer, not a boolean")
    if isinstance(value, str):
        text = value.strip()
        if not text.isascii() or not text.isdigit():
            raise ValueError(f"must be a positive decimal integer, got {value!r}")
        return int(text)
    return value


def _describe(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(loc) for loc in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )


class HasherConfig(BaseModel):
    """Immutable hasher parameters.

    Field aliases are the property keys, so a property map validates directly.
    Algorithm names are only checked for being non-empty here; resolving them
    is deferred to the moment a key is derived or a salt is drawn.

    Usage:
        config = HasherConfig(pbkdf2_iterations=10)
        config = HasherConfig.from_properties({"salt-byte-size": "32"})
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    hash_byte_size: int = Field(
        default=DEFAULT_HASH_BYTE_SIZE, alias=PARAM_HASH_BYTE_SIZE, gt=0
    )
    salt_byte_size: int = Field(
        default=DEFAULT_SALT_BYTE_SIZE, alias=PARAM_SALT_BYTE_SIZE, gt=0
    )
    pbkdf2_iterations: int = Field(
        default=DEFAULT_PBKDF2_ITERATIONS,
        alias=PARAM_PBKDF2_ITERATIONS,
        gt=0,
        le=MAX_ITERATIONS,
    )
    pbkdf2_algorithm: str = Field(
        default=DEFAULT_PBKDF2_ALGORITHM, alias=PARAM_PBKDF2_ALGORITHM, min_length=1
    )
    secure_random_algorithm: str = Field(
        default=DEFAULT_SECURE_RANDOM_ALGORITHM,
        alias=PARAM_SECURE_RANDOM_ALGORITHM,
        min_length=1,
    )

    @field_validator(*_NUMERIC_FIELDS, mode="before")
    @classmethod
    def validate_positive_int(cls, v: Any) -> Any:
        return _parse_positive_int(v)

    @classmethod
    def create(cls, **values: Any) -> "HasherConfig":
        """
        Build a config from field names, raising the domain error on bad input.

        Raises:
            InvalidConfigurationException: If any value is malformed
        """
        try:
            return cls(**values)
        except ValidationError as e:
            raise InvalidConfigurationException(
                f"Invalid hasher configuration: {_describe(e)}"
            ) from e

    @classmethod
    def from_properties(
        cls,
        properties: Mapping[str, Any],
        base: "HasherConfig | None" = None,
    ) -> "HasherConfig":
        """
        Load configuration from a string-keyed property map.

        Recognised keys override ``base`` (or the built-in defaults), absent
        keys keep their values and unrecognised keys are ignored.

        Args:
            properties: Mapping such as {"pbkdf2-iterations": "1000"}
            base: Configuration to start from

        Returns:
            New HasherConfig

        Raises:
            InvalidConfigurationException: If a numeric value is not a positive integer
        """
        values = (base or cls()).model_dump(by_alias=True)
        values.update({key: properties[key] for key in PROPERTY_KEYS if key in properties})
        try:
            return cls.model_validate(values)
        except ValidationError as e:
            raise InvalidConfigurationException(
                f"Invalid hasher configuration: {_describe(e)}"
            ) from e

    def replace(self, **changes: Any) -> "HasherConfig":
        """Return a validated copy with some fields changed."""
        return self.create(**{**self.model_dump(), **changes})

    def to_properties(self) -> dict[str, str]:
        """Render the configuration back into a property map."""
        return {key: str(value) for key, value in self.model_dump(by_alias=True).items()}


class HasherSettings(BaseSettings):
    """Hasher defaults loaded from environment variables or a .env file.

    Variables use the PASSWORD_HASH_ prefix, e.g. PASSWORD_HASH_PBKDF2_ITERATIONS.

    Usage:
        settings = get_settings()
        hasher = Pbkdf2PasswordHasher(settings.to_config())
    """

    hash_byte_size: int = Field(default=DEFAULT_HASH_BYTE_SIZE, gt=0)
    salt_byte_size: int = Field(default=DEFAULT_SALT_BYTE_SIZE, gt=0)
    pbkdf2_iterations: int = Field(default=DEFAULT_PBKDF2_ITERATIONS, gt=0, le=MAX_ITERATIONS)
    pbkdf2_algorithm: str = Field(default=DEFAULT_PBKDF2_ALGORITHM, min_length=1)
    secure_random_algorithm: str = Field(
        default=DEFAULT_SECURE_RANDOM_ALGORITHM, min_length=1
    )

    model_config = SettingsConfigDict(
        env_prefix="PASSWORD_HASH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator(*_NUMERIC_FIELDS, mode="before")
    @classmethod
    def validate_positive_int(cls, v: Any) -> Any:
        return _parse_positive_int(v)

    def to_config(self) -> HasherConfig:
        """Convert the loaded settings into an immutable HasherConfig."""
        return HasherConfig.create(**self.model_dump())


@lru_cache
def get_settings() -> HasherSettings:
    """Get cached settings instance.

    For testing, clear the cache with: get_settings.cache_clear()

    Raises:
        InvalidConfigurationException: If an environment value is malformed
    """
    try:
        return HasherSettings()
    except ValidationError as e:
        raise InvalidConfigurationException(
            f"Invalid hasher settings: {_describe(e)}"
        ) from e
