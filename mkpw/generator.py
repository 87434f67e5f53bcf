"""
mkpw.generator
Secure password generator built from character classifiers.

A password is assembled from grapheme clusters: each classifier contributes
its minimum number of characters, the rest is drawn from the pooled
candidates of every classifier, then the whole is shuffled.
"""

import logging
import string
from dataclasses import dataclass, field
from random import Random, SystemRandom
from typing import Iterable, List, Optional, Sequence, Tuple

from .graphemes import grapheme_count, split_graphemes

logger = logging.getLogger(__name__)

DEFAULT_LENGTH = 16
LOWERCASE_CANDIDATES = string.ascii_lowercase
UPPERCASE_CANDIDATES = string.ascii_uppercase
NUMBER_CANDIDATES = string.digits
# ASCII order
SYMBOL_CANDIDATES = "!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~"

SIMILAR_CHARACTERS = frozenset({"i", "l", "1", "o", "0", "O"})
WHITESPACE_CANDIDATE = " "


class PasswordConfigError(ValueError):
    """The generator configuration cannot produce a password."""


class InvalidLengthError(PasswordConfigError):
    def __init__(self, length: int):
        self.length = length
        super().__init__(f"The password length must be at least 1, but it is set to {length}.")


class InconsistentClassifierError(PasswordConfigError):
    def __init__(self, name: str, minimum_count: int):
        self.name = name
        self.minimum_count = minimum_count
        super().__init__(
            f"{name} is empty, but the minimum number of characters is set to {minimum_count}. "
            "Please set the minimum number of characters to 0."
        )


class OverConstrainedError(PasswordConfigError):
    def __init__(self, total: int, length: int):
        self.total = total
        self.length = length
        super().__init__(
            "The total minimum number of characters is greater than the password length. "
            f"The total minimum number of characters is {total}, but the password length is {length}."
        )


class EmptyPoolError(PasswordConfigError):
    def __init__(self):
        super().__init__("No candidates for the password. Please set the candidates for the password.")


@dataclass(frozen=True)
class Classifier:
    """Candidate grapheme clusters plus how many of them every password must contain."""

    candidates: Tuple[str, ...] = ()
    minimum_count: int = 0

    def __post_init__(self):
        # accept any sequence, store an immutable copy
        object.__setattr__(self, "candidates", tuple(self.candidates))
        if self.minimum_count < 0:
            raise ValueError("minimum_count must be >= 0")

    @classmethod
    def from_text(cls, text: str, minimum_count: int = 0) -> "Classifier":
        return cls(tuple(split_graphemes(text)), minimum_count)

    def validate(self, name: str) -> None:
        if self.minimum_count > 0 and not self.candidates:
            raise InconsistentClassifierError(name, self.minimum_count)

    def without(self, excluded: Iterable[str]) -> "Classifier":
        excluded = set(excluded)
        return Classifier(tuple(c for c in self.candidates if c not in excluded), self.minimum_count)


@dataclass
class PasswordMaker:
    """
    Password generator.

    Every field may be changed between calls; the configuration is only
    checked when `generate()` runs. `rng` is anything with the
    `random.Random` interface, a `random.Random(seed)` makes output
    reproducible.
    """

    length: int = DEFAULT_LENGTH
    exclude_similar: bool = False
    include_whitespace: bool = False
    lowercase: Classifier = field(default_factory=lambda: Classifier.from_text(LOWERCASE_CANDIDATES, 1))
    uppercase: Classifier = field(default_factory=lambda: Classifier.from_text(UPPERCASE_CANDIDATES, 1))
    number: Classifier = field(default_factory=lambda: Classifier.from_text(NUMBER_CANDIDATES, 1))
    symbol: Classifier = field(default_factory=lambda: Classifier.from_text(SYMBOL_CANDIDATES, 1))
    others: List[Classifier] = field(default_factory=list)
    rng: Random = field(default_factory=SystemRandom, repr=False)

    def classifiers(self) -> List[Tuple[str, Classifier]]:
        """Named classifiers in validation order, with the similar-character filter applied."""
        named = [
            ("Lowercases", self.lowercase),
            ("Uppercases", self.uppercase),
            ("Numbers", self.number),
            ("Symbols", self.symbol),
        ]
        named.extend((f"Other characters at index {i}", c) for i, c in enumerate(self.others))
        if self.exclude_similar:
            named = [(name, c.without(SIMILAR_CHARACTERS)) for name, c in named]
        return named

    def candidates(self) -> List[str]:
        """The pooled candidate set: every classifier's candidates, concatenated."""
        pool: List[str] = []
        for _, classifier in self.classifiers():
            pool.extend(classifier.candidates)
        if self.include_whitespace:
            pool.append(WHITESPACE_CANDIDATE)
        return pool

    def validate(self) -> None:
        """
        Raise a PasswordConfigError subclass if no password can be generated.

        Checks, in order: length, each classifier, sum of minimums, pool.
        """
        if self.length < 1:
            raise InvalidLengthError(self.length)

        classifiers = self.classifiers()
        for name, classifier in classifiers:
            classifier.validate(name)

        total = sum(c.minimum_count for _, c in classifiers)
        if total > self.length:
            raise OverConstrainedError(total, self.length)

        if not self.candidates():
            raise EmptyPoolError()

    def generate(self) -> str:
        """
        Generate one password according to the current settings.
        """
        self.validate()

        classifiers = self.classifiers()
        pool = self.candidates()

        password_chars: List[str] = []
        for _, classifier in classifiers:
            for _ in range(classifier.minimum_count):
                password_chars.append(self.rng.choice(classifier.candidates))

        remaining = self.length - len(password_chars)
        for _ in range(remaining):
            password_chars.append(self.rng.choice(pool))

        self.rng.shuffle(password_chars)
        password = "".join(password_chars)
        if logger.isEnabledFor(logging.DEBUG):
            # adjacent candidates such as lone regional indicators can merge into one cluster
            logger.debug(
                "generated password of %d characters (%d grapheme clusters) from a pool of %d",
                len(password_chars), grapheme_count(password), len(pool),
            )
        return password

    def generate_many(self, count: int) -> List[str]:
        if count < 0:
            raise ValueError("count must be >= 0")
        return [self.generate() for _ in range(count)]


def generate(
    length: int = DEFAULT_LENGTH,
    others: Optional[Sequence[Classifier]] = None,
    rng: Optional[Random] = None,
    **fields,
) -> str:
    """
    Generate a cryptographically secure password with the default classifiers,
    overriding any PasswordMaker field by keyword.
    """
    maker = PasswordMaker(length=length, others=list(others or []), **fields)
    if rng is not None:
        maker.rng = rng
    return maker.generate()
