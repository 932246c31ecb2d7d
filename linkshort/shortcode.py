"""Short code generation utilities."""

import random
import string
from typing import Optional

from .common.validators import SHORT_CODE_PATTERN


class ShortCodeGenerator:
    """Generate random candidate short codes.

    Codes are not checked for uniqueness here; the registry does that against
    the store. Selection uses the ``random`` module and is not meant to be
    unpredictable.
    """

    # Base62 characters (alphanumeric, case-sensitive)
    BASE62_CHARS = string.ascii_uppercase + string.ascii_lowercase + string.digits

    MIN_LENGTH = 6
    MAX_LENGTH = 8

    def __init__(self, rng: Optional[random.Random] = None):
        """Initialize short code generator.

        Args:
            rng: Optional random source (seed one for reproducible codes)
        """
        self.rng = rng or random.Random()

    def generate(self) -> str:
        """Generate a random code of 6, 7 or 8 characters.

        Returns:
            Random short code
        """
        length = self.rng.randint(self.MIN_LENGTH, self.MAX_LENGTH)
        return self.generate_random(length)

    def generate_random(self, length: int) -> str:
        """Generate a random code of exactly ``length`` characters.

        Args:
            length: Length of the code

        Returns:
            Random short code
        """
        return ''.join(self.rng.choice(self.BASE62_CHARS) for _ in range(length))

    @staticmethod
    def validate_format(code: str) -> bool:
        """Check if code is 6-8 characters drawn only from [A-Za-z0-9].

        Args:
            code: Code to validate

        Returns:
            True if valid format
        """
        return isinstance(code, str) and SHORT_CODE_PATTERN.fullmatch(code) is not None
