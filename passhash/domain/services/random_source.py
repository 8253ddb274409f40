"""Random source interface used to generate salts.

Salt generation consumes a process-wide secure generator. Hashers receive it
as an explicit dependency so tests can substitute a deterministic source.
"""

from abc import ABC, abstractmethod


class IRandomSource(ABC):
    """Interface for cryptographically secure byte generators."""

    @property
    @abstractmethod
    def algorithm(self) -> str:
        """Name of the generation algorithm (e.g. "system", "SHA256PRNG")."""
        pass

    @abstractmethod
    def next_bytes(self, size: int) -> bytes:
        """
        Return ``size`` random bytes.

        Implementations must be safe to call from several threads at once.
        """
        pass
