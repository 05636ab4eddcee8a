from krypto.modules.errors import (
    DimensionMismatch,
    HillCipherError,
    InvalidCharacter,
    NotInvertible,
    ParseFailure,
)
from krypto.modules.hill_cipher import HillCipher, generate_hill_cipher_key, normalize

__version__ = "1.0.0"
