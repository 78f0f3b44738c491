import base58
from solders.keypair import Keypair

from .errors import InvalidKey

SECRET_KEY_LENGTH = 64


def keypair_from_base58(secret: str) -> Keypair:
    """Decode a base-58 encoded 64-byte secret into a keypair.

    The secret itself never appears in the raised error.
    """
    if not secret or not isinstance(secret, str):
        raise InvalidKey("private key is required")
    try:
        raw = base58.b58decode(secret.strip())
    except ValueError:
        raise InvalidKey("private key is not valid base58") from None
    if len(raw) != SECRET_KEY_LENGTH:
        raise InvalidKey(f"private key must decode to {SECRET_KEY_LENGTH} bytes, got {len(raw)}")
    try:
        return Keypair.from_bytes(raw)
    except ValueError:
        raise InvalidKey("private key was rejected as a keypair") from None
