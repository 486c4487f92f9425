"""Base generator class for all data generators."""

from __future__ import annotations

import random
import unicodedata
from abc import ABC

from faker import Faker


class BaseGenerator(ABC):
    """Base class for all data generators.

    Provides common initialization: Faker instance creation and
    seed-based reproducibility.

    Parameters
    ----------
    seed : int | None
        Random seed for reproducibility.
    locale : str
        Faker locale (default ``fr_FR``, CFONB files come from French banks).
    """

    def __init__(
        self,
        seed: int | None = None,
        locale: str = "fr_FR",
    ) -> None:
        self.fake = Faker(locale)
        if seed is not None:
            self.fake.seed_instance(seed)
            random.seed(seed)

    @staticmethod
    def to_record_text(value: str, length: int) -> str:
        """Upper-case ASCII text with single spaces, cut to a fixed-width field."""
        ascii_value = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
        return " ".join(ascii_value.upper().split())[:length].rstrip()
