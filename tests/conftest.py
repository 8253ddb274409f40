"""Pytest configuration and fixtures.

Shared fixtures for all tests:
- Hashers run with 10 iterations so hundreds of hashes stay fast
- Deterministic random sources make records predictable where needed
"""

import os

import pytest

from passhash.infrastructure.config.settings import HasherConfig, get_settings
from passhash.infrastructure.security.pbkdf2_password_hasher import Pbkdf2PasswordHasher
from tests.fakes.random_source_fake import FakeRandomSource

TEST_ITERATIONS = 10


@pytest.fixture
def fast_config() -> HasherConfig:
    """Default configuration with the iteration count lowered for speed."""
    return HasherConfig(pbkdf2_iterations=TEST_ITERATIONS)


@pytest.fixture
def hasher(fast_config) -> Pbkdf2PasswordHasher:
    """Provide a hasher using the real system random source."""
    return Pbkdf2PasswordHasher(fast_config)


@pytest.fixture
def fake_random_source() -> FakeRandomSource:
    """Provide a fresh deterministic random source."""
    return FakeRandomSource()


@pytest.fixture
def deterministic_hasher(fast_config, fake_random_source) -> Pbkdf2PasswordHasher:
    """Provide a hasher whose salts come from FakeRandomSource."""
    return Pbkdf2PasswordHasher(fast_config, random_source=fake_random_source)


@pytest.fixture
def clean_settings(monkeypatch, tmp_path):
    """
    Isolate settings from the developer's environment.

    Removes PASSWORD_HASH_* variables, runs from an empty directory so no
    .env file is picked up, and clears the settings cache before and after.
    """
    for name in list(os.environ):
        if name.upper().startswith("PASSWORD_HASH_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()
