"""Short key generation.

Keys are fixed length strings sampled uniformly from a 62 character
alphabet. Collision avoidance works against a caller supplied set of
keys that must not be returned.
"""

import random
import string
from typing import MutableSet, Optional

from shorturl.services.exceptions import KeyExhaustionError

KEY_ALPHABET = string.digits + string.ascii_lowercase + string.ascii_uppercase
KEY_LENGTH = 6


class KeyGenerator:
    """
    Random key generator with collision avoidance.

    Sampling uses a non-cryptographic ``random.Random`` instance; keys are
    identifiers, not secrets.
    """

    def __init__(
        self,
        alphabet: str = KEY_ALPHABET,
        length: int = KEY_LENGTH,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the generator.

        Args:
            alphabet: Characters keys are drawn from
            length: Number of characters per key
            rng: Random source, a fresh ``random.Random`` when omitted

        Raises:
            ValueError: If the alphabet is empty or repeats a character,
                or the length is not positive
        """
        if not alphabet:
            raise ValueError("Key alphabet must not be empty")
        if len(set(alphabet)) != len(alphabet):
            raise ValueError("Key alphabet must not contain duplicate characters")
        if length < 1:
            raise ValueError(f"Key length must be positive, got {length}")

        self.alphabet = alphabet
        self.length = length
        self._rng = rng or random.Random()

    @property
    def total_combinations(self) -> int:
        """Number of distinct keys in the keyspace."""
        return len(self.alphabet) ** self.length

    def generate(self, existing_keys: MutableSet[str]) -> str:
        """
        Generate a key that is not in ``existing_keys``.

        The returned key is added to ``existing_keys`` so repeated calls
        with the same set never return the same key twice.

        Args:
            existing_keys: Keys that must not be returned

        Returns:
            str: A key absent from ``existing_keys``

        Raises:
            KeyExhaustionError: If ``existing_keys`` already covers the keyspace
        """
        if len(existing_keys) >= self.total_combinations:
            raise KeyExhaustionError(
                f"No more unique keys can be generated: {len(existing_keys)} keys "
                f"known out of {self.total_combinations} possible"
            )

        key = self._sample()
        while key in existing_keys:
            key = self._sample()

        existing_keys.add(key)
        return key

    def _sample(self) -> str:
        return "".join(self._rng.choice(self.alphabet) for _ in range(self.length))
