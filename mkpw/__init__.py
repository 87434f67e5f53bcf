"""mkpw — highly customizable password generation."""

__version__ = "0.1.1"

from .generator import (
    Classifier,
    PasswordMaker,
    PasswordConfigError,
    InvalidLengthError,
    InconsistentClassifierError,
    OverConstrainedError,
    EmptyPoolError,
    generate,
)
