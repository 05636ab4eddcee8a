import logging
import string

import numpy as np

from krypto.modules.errors import DimensionMismatch, InvalidCharacter, NotInvertible
from krypto.modules.modular import (
    MODULUS,
    as_key_matrix,
    determinant,
    inverse_matrix,
    invertible,
)

logger = logging.getLogger(__name__)

# ------------------- ALPHABET -------------------

ALPHABET = string.ascii_uppercase
ALPHABET_SIZE = len(ALPHABET)
PADDING = "X"

ROW = "row"
COLUMN = "column"
ORIENTATIONS = (ROW, COLUMN)


def char_to_index(char, position=0):
    """Convert an uppercase letter to its index (A=0 ... Z=25)."""
    if len(char) != 1 or char not in ALPHABET:
        raise InvalidCharacter(char, position)
    return ALPHABET.index(char)


def index_to_char(index):
    """Convert an index back to a letter, wrapping modulo the alphabet size."""
    return ALPHABET[index % ALPHABET_SIZE]


def text_to_numbers(text):
    return [char_to_index(c, i) for i, c in enumerate(text)]


def numbers_to_text(numbers):
    return "".join(index_to_char(int(n)) for n in numbers)


def clean_text(text):
    """Drop whitespace and uppercase ``text``; anything outside a-z and A-Z is rejected."""
    cleaned = []
    for position, char in enumerate(text):
        if char.isspace():
            continue
        # checked before upper(), which maps some non-Latin letters into A-Z
        if char not in string.ascii_letters:
            raise InvalidCharacter(char, position)
        cleaned.append(char.upper())
    return "".join(cleaned)


def normalize(text, block_size):
    """Clean ``text`` and right-pad it with the filler letter to a multiple of ``block_size``."""
    cleaned = clean_text(text)
    remainder = len(cleaned) % block_size
    if remainder:
        cleaned += PADDING * (block_size - remainder)
    return cleaned


# ------------------- HILL CIPHER FUNCTIONS -------------------

def transform_block(vector, matrix, orientation=ROW, modulus=MODULUS):
    """Multiply one block by ``matrix`` and reduce the result into [0, modulus).

    With ``orientation="row"`` the block is a row vector (``v . M``); with
    ``"column"`` it is a column vector (``M . v``).
    """
    matrix = np.asarray(matrix)
    vector = np.asarray(vector, dtype=np.int64)
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise DimensionMismatch(f"Matrix must be square, got shape {matrix.shape}.")
    if vector.ndim != 1 or vector.shape[0] != matrix.shape[0]:
        raise DimensionMismatch(
            f"Vector length ({vector.size}) must match matrix size ({matrix.shape[0]})."
        )

    if orientation == ROW:
        result = np.dot(vector, matrix)
    elif orientation == COLUMN:
        result = np.dot(matrix, vector)
    else:
        raise ValueError(f"Unknown orientation {orientation!r}, expected one of {ORIENTATIONS}.")
    return result % modulus


def _random_matrix(size, rng):
    # numpy Generators draw the whole matrix at once; random.Random-like
    # handles only expose randint, whose upper bound is inclusive.
    if hasattr(rng, "integers"):
        return rng.integers(1, MODULUS, size=(size, size), dtype=np.int64)
    return np.array(
        [[rng.randint(1, MODULUS - 1) for _ in range(size)] for _ in range(size)],
        dtype=np.int64,
    )


def generate_hill_cipher_key(size, rng=None):
    """Sample ``size`` x ``size`` matrices with entries in [1, 25] until one is invertible mod 26."""
    if size < 2:
        raise DimensionMismatch(f"Key matrix must be at least 2x2, got size {size}.")
    if rng is None:
        rng = np.random.default_rng()

    attempts = 0
    while True:
        attempts += 1
        matrix = _random_matrix(size, rng)
        if invertible(determinant(matrix)):
            break

    logger.debug("Generated random %dx%d key after %d attempt(s).", size, size, attempts)
    return matrix


# ------------------- HILL CIPHER -------------------

class HillCipher:
    """Hill cipher over A-Z with a fixed, validated key matrix.

    The key and its inverse are computed once and stored as read-only
    arrays, so one instance can be shared freely between callers.
    """

    def __init__(self, size, key_matrix=None, rng=None, orientation=ROW):
        if orientation not in ORIENTATIONS:
            raise ValueError(f"Unknown orientation {orientation!r}, expected one of {ORIENTATIONS}.")

        if key_matrix is not None:
            matrix = as_key_matrix(key_matrix)
            if matrix.shape[0] != size:
                raise DimensionMismatch(
                    f"Matrix size ({size}) must match the dimensions of the key matrix "
                    f"({matrix.shape[0]}x{matrix.shape[1]})."
                )
            matrix = matrix % MODULUS
            det = determinant(matrix)
            logger.debug("Determinant: %d", det)
            if not invertible(det):
                raise NotInvertible(f"Matrix is not invertible mod {MODULUS} (determinant {det}).")
        else:
            matrix = generate_hill_cipher_key(size, rng)

        inverse = inverse_matrix(matrix)
        logger.debug("Inverse matrix: %s", inverse.tolist())

        matrix.setflags(write=False)
        inverse.setflags(write=False)
        self._size = size
        self._orientation = orientation
        self._key = matrix
        self._inverse = inverse

    @property
    def size(self):
        return self._size

    @property
    def orientation(self):
        return self._orientation

    def __repr__(self):
        return f"HillCipher(size={self.size}, orientation={self.orientation!r})"

    def key_matrix(self):
        return self._key.tolist()

    def inverse_key_matrix(self):
        return self._inverse.tolist()

    def normalize(self, text):
        return normalize(text, self.size)

    def _apply(self, text, matrix):
        output = []
        for i in range(0, len(text), self.size):
            chunk = text_to_numbers(text[i:i + self.size])
            output.extend(transform_block(chunk, matrix, self.orientation))
        return numbers_to_text(output)

    def encrypt(self, plaintext):
        """Encrypts plaintext; spaces are dropped and the last block is padded with 'X'."""
        return self._apply(self.normalize(plaintext), self._key)

    def decrypt(self, ciphertext, length=None):
        """Decrypts ciphertext.

        If ``length`` (the unpadded, normalized plaintext length) is given the
        result is cut to it. Otherwise trailing 'X' letters are stripped, which
        also removes any real trailing X of the plaintext.
        """
        text = clean_text(ciphertext)
        if len(text) % self.size:
            raise DimensionMismatch(
                f"Ciphertext length ({len(text)}) is not a multiple of the block size ({self.size})."
            )

        plaintext = self._apply(text, self._inverse)
        if length is None:
            return plaintext.rstrip(PADDING)
        if not max(len(plaintext) - self.size, -1) < length <= len(plaintext):
            raise ValueError(f"Length {length} does not fit a {len(plaintext)} letter plaintext.")
        return plaintext[:length]
