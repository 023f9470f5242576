"""
Short code generation strategies for URL shortener.
Uses Strategy Pattern to allow different generation algorithms.
"""

import logging
import random
import string
from abc import ABC, abstractmethod
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class ShortCodeStrategy(ABC):
    """Abstract base class for short code generation strategies"""

    @abstractmethod
    def generate(self, is_taken: Callable[[str], bool]) -> str:
        """
        Generate a short code.

        Args:
            is_taken: Predicate telling whether a candidate is already used
                      (stored alias or reserved token)

        Returns:
            A short code for which is_taken() is False
        """
        pass


class RandomShortCodeStrategy(ShortCodeStrategy):
    """
    Random generation strategy.
    Draws characters uniformly from [A-Za-z0-9] and redraws on collision.

    After max_retries collisions at one length the code grows by one
    character, so generation always terminates even as the space fills up.
    """

    characters = string.ascii_letters + string.digits

    def __init__(
        self,
        length: int = 5,
        max_retries: int = 8,
        rng: Optional[random.Random] = None
    ):
        self.length = length
        self.max_retries = max_retries
        self.rng = rng or random.Random()

    def generate(self, is_taken: Callable[[str], bool]) -> str:
        """Generate random short code with collision checking"""
        length = self.length
        while True:
            for attempt in range(self.max_retries):
                short_code = self._generate_random_string(length)
                if not is_taken(short_code):
                    return short_code

            logger.info(
                "No free short code of length %d after %d attempts, growing to %d",
                length, self.max_retries, length + 1
            )
            length += 1

    def _generate_random_string(self, length: int) -> str:
        """Generate a random string of specified length"""
        return ''.join(self.rng.choice(self.characters) for _ in range(length))
