import logging
import sys

from krypto.config import HILL_MATRIX_SIZE, LOG_FILE, LOG_LEVEL, METRICS_CSV, RSA_KEY_BITS, SHOW_METRICS
from krypto.metrics import measure_performance, save_metrics_to_csv
from krypto.modules.errors import ParseFailure
from krypto.modules.hill_cipher import HillCipher
from krypto.modules.rsa import generate_rsa_keypair, rsa_decrypt_text, rsa_encrypt_text

logger = logging.getLogger(__name__)


# ------------------- LOGGER CONFIGURATION -------------------
def configure_logging(level=None, log_file=None):
    level = level or LOG_LEVEL
    log_file = LOG_FILE if log_file is None else log_file

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.insert(0, logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


# ------------------- KEY INPUT -------------------
def read_matrix_size():
    raw = input("Give the dimension of the key matrix (e.g. 2 for 2x2, 3 for 3x3): ").strip()
    try:
        return int(raw)
    except ValueError:
        logger.warning("Could not parse matrix size %r, using default %d.", raw, HILL_MATRIX_SIZE)
        return HILL_MATRIX_SIZE


def parse_matrix_row(line, size, row_number=1):
    """Parse one line of space separated key entries."""
    parts = line.split()
    if len(parts) != size:
        raise ParseFailure(f"Row {row_number} needs {size} values, got {len(parts)}.")
    try:
        return [int(part) for part in parts]
    except ValueError as e:
        raise ParseFailure(f"Row {row_number} contains a non-integer value: {e}") from e


def read_key_matrix(size):
    print(f"Give the elements of the {size}x{size} key matrix row by row, "
          "where individual values are separated by an empty space:")
    return [parse_matrix_row(input(f"Row {i + 1}: "), size, i + 1) for i in range(size)]


def print_matrix(matrix):
    for row in matrix:
        print(" ".join(str(value) for value in row))


def _run(func, operation, *args):
    if not SHOW_METRICS:
        return func(*args)

    result, metrics = measure_performance(func, *args)
    if METRICS_CSV:
        save_metrics_to_csv(metrics, operation, METRICS_CSV)
    return result


# ------------------- MENU ACTIONS -------------------
def hill_cipher_menu(option, rng=None):
    """Option 1 reads the key from the user, option 2 generates it."""
    if option == "1":
        plaintext = input("Give the plaintext to be encrypted: ")
        size = read_matrix_size()
        cipher = HillCipher(size, read_key_matrix(size))
    else:
        size = read_matrix_size()
        cipher = HillCipher(size, rng=rng)
        print("Created random key matrix:")
        print_matrix(cipher.key_matrix())
        plaintext = input("Give the plaintext to be encrypted: ")

    encrypted = _run(cipher.encrypt, "encryption", plaintext)
    print(f"Encrypted text: {encrypted}")

    decrypted = _run(cipher.decrypt, "decryption", encrypted)
    print(f"Decrypted text: {decrypted}")
    return encrypted, decrypted


def rsa_menu(bits=None):
    plaintext = input("Give the plaintext to be encrypted: ")
    private_key, public_key = generate_rsa_keypair(bits or RSA_KEY_BITS)

    encrypted = _run(rsa_encrypt_text, "rsa_encryption", plaintext, public_key)
    print(f"Encrypted text (RSA): {encrypted}")

    decrypted = _run(rsa_decrypt_text, "rsa_decryption", encrypted, private_key)
    print(f"Decrypted text (RSA): {decrypted}")
    return encrypted, decrypted


# ------------------- MAIN PROGRAM -------------------
def run_menu(rng=None):
    while True:
        try:
            print("Encryption Program")
            print("1. Symmetrical Hill cipher: input of plaintext and of the key matrix")
            print("2. Symmetrical Hill cipher: generate a random key matrix")
            print("3. Quit")
            print("4. Asymmetrical encryption with RSA")
            option = input("Please choose an option: ").strip()

            if option == "3":
                print("Program terminated.")
                return

            if option in {"1", "2"}:
                hill_cipher_menu(option, rng)
            elif option == "4":
                rsa_menu()
            else:
                print("Invalid option, please try again.")
        except ValueError as e:
            logger.debug("Operation failed", exc_info=True)
            print(f"An error has occurred: {e}")

        repeat = input("\nDo you want to repeat? (y/n): ").strip().lower()
        if repeat != "y":
            if repeat == "n":
                print("Program terminated.")
            return


def main(rng=None):
    configure_logging()
    logger.info("STARTING PROGRAM...")
    try:
        run_menu(rng)
    except (EOFError, KeyboardInterrupt):
        print()
        logger.info("Input closed, exiting.")


if __name__ == "__main__":
    main()
