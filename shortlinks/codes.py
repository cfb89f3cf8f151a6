"""Short code generation.

The allocator asks a ``CodeGenerator`` for random codes, so tests can swap in a
deterministic sequence and drive collisions on purpose.
"""

from abc import ABC, abstractmethod

from nanoid import generate

__all__ = ["CodeGenerator", "NanoidCodeGenerator", "NANOID_ALPHABET"]

# nanoid default alphabet; contains no path separators.
NANOID_ALPHABET = "_-0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"


class CodeGenerator(ABC):
    @abstractmethod
    def generate_code(self, length: int) -> str:
        """Return a random code of exactly ``length`` characters."""


class NanoidCodeGenerator(CodeGenerator):
    """URL-safe random codes (``A-Za-z0-9_-``) from nanoid's default alphabet."""

    def generate_code(self, length: int) -> str:
        assert isinstance(length, int) and length > 0, f"length must be a positive integer, got {length!r}"
        return generate(NANOID_ALPHABET, length)
