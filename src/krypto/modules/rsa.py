import base64
import logging

from Crypto.Cipher import PKCS1_OAEP
from Crypto.PublicKey import RSA

from krypto.config import RSA_KEY_BITS

logger = logging.getLogger(__name__)

OAEP_OVERHEAD = 42  # 2 * SHA-1 digest size + 2

# ------------------- RSA KEYS -------------------

def generate_rsa_keypair(bits=RSA_KEY_BITS):
    """Generate an RSA key pair and return it as (private_pem, public_pem)."""
    key = RSA.generate(bits)
    private_key = key.export_key()
    public_key = key.publickey().export_key()
    logger.debug("Generated %d-bit RSA key pair.", bits)
    return private_key, public_key


def _import_key(key):
    if isinstance(key, RSA.RsaKey):
        return key
    return RSA.import_key(key)


def max_plaintext_length(public_key):
    return (_import_key(public_key).size_in_bits() // 8) - OAEP_OVERHEAD

# ------------------- RSA ENCRYPTION -------------------

def rsa_encrypt(plaintext, public_key):
    """Encrypt bytes with RSA-OAEP under ``public_key`` (PEM or key object)."""
    public_key_obj = _import_key(public_key)

    max_length = max_plaintext_length(public_key_obj)
    if len(plaintext) > max_length:
        raise ValueError(f"Data too large for RSA encryption. Limit is {max_length} bytes.")

    return PKCS1_OAEP.new(public_key_obj).encrypt(plaintext)


def rsa_encrypt_text(text, public_key):
    """Encrypt a string and return the ciphertext as Base64."""
    ciphertext = rsa_encrypt(text.encode("utf-8"), public_key)
    return base64.b64encode(ciphertext).decode("ascii")

# ------------------- RSA DECRYPTION -------------------

def rsa_decrypt(ciphertext, private_key):
    """Decrypt RSA-OAEP bytes with ``private_key``; raises ValueError on a bad ciphertext."""
    private_key_obj = _import_key(private_key)
    if not private_key_obj.has_private():
        raise ValueError("RSA decryption needs a private key.")
    return PKCS1_OAEP.new(private_key_obj).decrypt(ciphertext)


def rsa_decrypt_text(encoded, private_key):
    ciphertext = base64.b64decode(encoded, validate=True)
    return rsa_decrypt(ciphertext, private_key).decode("utf-8")
