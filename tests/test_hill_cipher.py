import itertools
import random

import numpy as np
import pytest

from krypto.modules.errors import DimensionMismatch, InvalidCharacter, NotInvertible
from krypto.modules.hill_cipher import (
    COLUMN,
    HillCipher,
    char_to_index,
    clean_text,
    generate_hill_cipher_key,
    normalize,
    numbers_to_text,
    text_to_numbers,
    transform_block,
)
from krypto.modules.modular import determinant, gcd

KEY = [[3, 3], [2, 5]]


@pytest.fixture
def cipher():
    return HillCipher(2, KEY)


# ------------------- ALPHABET -------------------

def test_alphabet_mapping():
    assert text_to_numbers("HELP") == [7, 4, 11, 15]
    assert numbers_to_text([3, 15, 11, 4]) == "DPLE"
    assert numbers_to_text([26, 27]) == "AB"


def test_char_to_index_rejects_non_letters():
    with pytest.raises(InvalidCharacter):
        char_to_index("a")
    with pytest.raises(InvalidCharacter):
        char_to_index("")


def test_clean_text_uppercases_and_drops_whitespace():
    assert clean_text("at tack\tat\ndawn") == "ATTACKATDAWN"


@pytest.mark.parametrize("text,char,position", [("HE1P", "1", 2), ("hi!", "!", 2), ("café", "é", 3), ("hıde", "ı", 1), ("ſtop", "ſ", 0)])
def test_clean_text_rejects_other_characters(text, char, position):
    with pytest.raises(InvalidCharacter) as exc_info:
        clean_text(text)
    assert exc_info.value.char == char
    assert exc_info.value.position == position


def test_normalize_pads_with_x():
    assert normalize("HELLO", 2) == "HELLOX"
    assert normalize("hello", 3) == "HELLOX"
    assert normalize("HELP", 2) == "HELP"
    assert normalize("", 3) == ""


@pytest.mark.parametrize("size", [2, 3, 4])
def test_padding_invariant(size):
    for length in range(0, 13):
        text = "A" * length
        padded = normalize(text, size)
        assert len(padded) % size == 0
        assert 0 <= len(padded) - length <= size - 1


# ------------------- WORKED SCENARIOS -------------------

def test_worked_example_first_block(cipher):
    assert cipher.encrypt("HELP")[:2] == "DP"


def test_worked_example(cipher):
    assert cipher.encrypt("HELP") == "DPLE"
    assert cipher.decrypt("DPLE") == "HELP"


def test_column_orientation_matches_textbook():
    cipher = HillCipher(2, KEY, orientation=COLUMN)
    assert cipher.encrypt("HELP") == "HIAT"
    assert cipher.decrypt("HIAT") == "HELP"


def test_rejects_singular_key():
    with pytest.raises(NotInvertible):
        HillCipher(2, [[2, 4], [1, 2]])


def test_rejects_key_sharing_factor_with_26():
    # det = 13, non-zero but not a unit mod 26
    with pytest.raises(NotInvertible):
        HillCipher(2, [[13, 0], [0, 1]])


def test_rejects_unknown_orientation():
    with pytest.raises(ValueError):
        HillCipher(2, KEY, orientation="diagonal")


# ------------------- KEY MATRIX MANAGER -------------------

def test_size_must_match_key():
    with pytest.raises(DimensionMismatch):
        HillCipher(3, KEY)


def test_key_must_be_square():
    with pytest.raises(DimensionMismatch):
        HillCipher(2, [[3, 3], [2]])


def test_flat_key_is_rejected():
    with pytest.raises(DimensionMismatch):
        HillCipher(2, [3, 3, 2, 5])


def test_size_and_orientation_are_read_only(cipher):
    with pytest.raises(AttributeError):
        cipher.size = 3
    with pytest.raises(AttributeError):
        cipher.orientation = COLUMN
    assert cipher.size == 2
    assert cipher.orientation == "row"
    assert cipher.encrypt("HELP") == "DPLE"


def test_key_matrix_accessor(cipher):
    assert cipher.key_matrix() == KEY
    assert cipher.inverse_key_matrix() == [[15, 17], [20, 9]]


def test_key_matrix_accessor_returns_copy(cipher):
    cipher.key_matrix()[0][0] = 0
    assert cipher.key_matrix() == KEY
    assert cipher.encrypt("HELP") == "DPLE"


def test_key_entries_are_reduced(cipher):
    reduced = HillCipher(2, [[29, 3], [-24, 5]])
    assert reduced.key_matrix() == KEY
    assert reduced.encrypt("HELP") == cipher.encrypt("HELP")


def test_accepts_numpy_key():
    assert HillCipher(2, np.array(KEY)).encrypt("HELP") == "DPLE"


def test_invertibility_gate():
    # every 2x2 matrix over {0..3}: construction succeeds iff gcd(det mod 26, 26) == 1
    for entries in itertools.product(range(4), repeat=4):
        matrix = [list(entries[:2]), list(entries[2:])]
        admissible = gcd(determinant(matrix) % 26, 26) == 1
        if admissible:
            HillCipher(2, matrix)
        else:
            with pytest.raises(NotInvertible):
                HillCipher(2, matrix)


@pytest.mark.parametrize("size", [2, 3, 4])
def test_random_key_is_invertible(size):
    key = generate_hill_cipher_key(size, np.random.default_rng(size))
    assert key.shape == (size, size)
    assert key.min() >= 1 and key.max() <= 25
    assert gcd(determinant(key) % 26, 26) == 1


def test_random_key_is_reproducible_with_seed():
    first = HillCipher(3, rng=np.random.default_rng(2024))
    second = HillCipher(3, rng=np.random.default_rng(2024))
    assert first.key_matrix() == second.key_matrix()
    assert first.encrypt("ATTACK AT DAWN") == second.encrypt("ATTACK AT DAWN")


def test_random_key_accepts_stdlib_random():
    first = HillCipher(2, rng=random.Random(7))
    second = HillCipher(2, rng=random.Random(7))
    assert first.key_matrix() == second.key_matrix()
    assert all(1 <= value <= 25 for row in first.key_matrix() for value in row)


def test_random_key_rejects_tiny_size():
    with pytest.raises(DimensionMismatch):
        generate_hill_cipher_key(1)


@pytest.mark.parametrize("size", [2, 3, 4])
def test_key_times_inverse_is_identity(size):
    for seed in range(5):
        cipher = HillCipher(size, rng=np.random.default_rng(seed))
        product = np.dot(cipher.key_matrix(), cipher.inverse_key_matrix()) % 26
        assert product.tolist() == np.eye(size, dtype=int).tolist()


# ------------------- BLOCK CODEC -------------------

@pytest.mark.parametrize("size", [2, 3, 4])
@pytest.mark.parametrize("orientation", ["row", "column"])
def test_round_trip(size, orientation):
    plaintext = "the quick brown fox jumps over the lazy dog"
    cipher = HillCipher(size, rng=np.random.default_rng(size * 11), orientation=orientation)
    ciphertext = cipher.encrypt(plaintext)
    assert len(ciphertext) % size == 0
    assert ciphertext.isalpha() and ciphertext.isupper()
    assert cipher.decrypt(ciphertext) == clean_text(plaintext)


def test_encrypt_is_deterministic(cipher):
    assert cipher.encrypt("attack at dawn") == cipher.encrypt("ATTACK AT DAWN")
    assert cipher.encrypt("HE LP") == cipher.encrypt("help")


def test_encrypt_rejects_invalid_characters(cipher):
    with pytest.raises(InvalidCharacter):
        cipher.encrypt("HELLO 123")


def test_encrypt_empty_text(cipher):
    assert cipher.encrypt("") == ""
    assert cipher.decrypt("") == ""


def test_decrypt_strips_trailing_filler(cipher):
    ciphertext = cipher.encrypt("TAX")
    assert len(ciphertext) == 4
    # lexical stripping also eats the plaintext's own X
    assert cipher.decrypt(ciphertext) == "TA"


def test_decrypt_with_length_is_lossless(cipher):
    ciphertext = cipher.encrypt("TAX")
    assert cipher.decrypt(ciphertext, length=3) == "TAX"
    assert cipher.decrypt(cipher.encrypt("BOXX"), length=4) == "BOXX"


@pytest.mark.parametrize("length", [-1, 2, 5])
def test_decrypt_rejects_impossible_length(cipher, length):
    with pytest.raises(ValueError):
        cipher.decrypt(cipher.encrypt("TAX"), length=length)


def test_decrypt_rejects_partial_block(cipher):
    with pytest.raises(DimensionMismatch):
        cipher.decrypt("DPL")


def test_decrypt_rejects_invalid_characters(cipher):
    with pytest.raises(InvalidCharacter):
        cipher.decrypt("DP-E")


def test_transform_block():
    assert transform_block([7, 4], KEY).tolist() == [3, 15]
    assert transform_block([7, 4], KEY, orientation=COLUMN).tolist() == [7, 8]


def test_transform_block_rejects_wrong_length():
    with pytest.raises(DimensionMismatch):
        transform_block([1, 2, 3], KEY)
    with pytest.raises(DimensionMismatch):
        transform_block([1, 2], [[1, 2, 3], [4, 5, 6]])
    with pytest.raises(DimensionMismatch):
        transform_block([1, 2], [[1, 2, 3], [4, 5, 6]], orientation=COLUMN)
    with pytest.raises(DimensionMismatch):
        transform_block([1, 2], [1, 2])
