"""
Short Code Generator

Short codes are fixed-width decimal strings drawn uniformly at random,
e.g. "004217" for the default width of 6 digits.

Random codes collide sooner or later, so creation goes through
generate_unused(), which retries against the set of taken codes and gives
up with GenerationExhaustedError after a bounded number of attempts.
"""

import logging
import random
from typing import Container, Optional

from shortlink.core.exceptions import GenerationExhaustedError

logger = logging.getLogger(__name__)


class ShortCodeGenerator:
    """
    Produces random zero-padded numeric short codes.
    """

    def __init__(
        self,
        length: int = 6,
        max_attempts: int = 32,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize the generator.

        Args:
            length: Number of digits per code (default: 6, "000000"-"999999")
            max_attempts: Candidates tried by generate_unused() before failing
            rng: Random source (default: a SystemRandom instance)
        """
        if length < 1:
            raise ValueError(f"Short code length must be positive (given value: {length})")
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be positive (given value: {max_attempts})")
        self.length = length
        self.max_attempts = max_attempts
        self.capacity = 10 ** length
        self._rng = rng or random.SystemRandom()

    def generate(self) -> str:
        """Return one random code; uniqueness is not checked."""
        return str(self._rng.randrange(self.capacity)).zfill(self.length)

    def generate_unused(self, occupied: Container[str]) -> str:
        """
        Return a random code that is not in ``occupied``.

        Raises:
            GenerationExhaustedError: If max_attempts candidates were all taken
        """
        for attempt in range(1, self.max_attempts + 1):
            code = self.generate()
            if code not in occupied:
                if attempt > 1:
                    logger.debug(f"Found free short code after {attempt} attempts")
                return code

        logger.error(f"All {self.max_attempts} short code candidates were taken")
        raise GenerationExhaustedError(self.max_attempts)
