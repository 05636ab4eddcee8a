class HillCipherError(ValueError):
    """Base class for every error raised by the Hill cipher core."""


class DimensionMismatch(HillCipherError):
    """Key matrix is not square, has the wrong size, or a block has the wrong length."""


class NotInvertible(HillCipherError):
    """Key matrix (or a determinant) has no inverse modulo the alphabet size."""


class InvalidCharacter(HillCipherError):
    """Text contains a character outside A-Z and whitespace."""

    def __init__(self, char, position):
        self.char = char
        self.position = position
        super().__init__(f"Invalid character {char!r} at position {position}.")


class ParseFailure(HillCipherError):
    """Key matrix entries typed into the shell could not be parsed."""
