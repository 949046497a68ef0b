# saivd/core/crypto.py

import hashlib
import hmac

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

RSA_KEY_SIZE = 2048
RSA_PUBLIC_EXPONENT = 65537

# ---------- KEY GENERATION ----------


def generate_rsa_keypair() -> tuple[str, str]:
    """
    RSA-2048 → (public PEM as SPKI, private PEM as unencrypted PKCS8)
    """
    private_key = rsa.generate_private_key(
        public_exponent=RSA_PUBLIC_EXPONENT,
        key_size=RSA_KEY_SIZE,
    )

    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")

    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("ascii")

    return public_pem, private_pem


# ---------- WEBHOOK SIGNATURES ----------


def sign_payload(secret: str, raw_body: bytes) -> str:
    """
    HMAC-SHA256 over the raw request body, hex encoded
    """
    return hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()


def verify_signature(raw_body: bytes, signature: str | None, secret: str) -> bool:
    if not signature or not secret:
        return False
    expected = sign_payload(secret, raw_body).encode("ascii")
    # Header values are latin-1 decoded strings
    given = signature.strip().lower().encode("latin-1", errors="replace")
    return hmac.compare_digest(expected, given)
