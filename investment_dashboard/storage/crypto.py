"""Authenticated at-rest encryption for the investments document."""

from __future__ import annotations

import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from investment_dashboard.storage.errors import DecryptionError

KDF_SALT = b"investment-dashboard/document/v1"
KDF_ITERATIONS = 390000
NONCE_BYTES = 12


def derive_key(secret: str, iterations: int = KDF_ITERATIONS) -> bytes:
    kdf = PBKDF2HMAC(algorithm=hashes.SHA256(), length=32, salt=KDF_SALT, iterations=iterations)
    return kdf.derive(secret.encode("utf-8"))


class DocumentCipher:
    """AES-256-GCM with a fresh nonce per write.

    Serialized form is ``hex(nonce) + ":" + hex(ciphertext || tag)``.
    """

    def __init__(self, secret: str, iterations: int = KDF_ITERATIONS) -> None:
        if not secret:
            raise ValueError("Encryption secret must not be empty.")
        self._aead = AESGCM(derive_key(secret, iterations))

    def encrypt(self, plaintext: bytes) -> str:
        nonce = os.urandom(NONCE_BYTES)
        ciphertext = self._aead.encrypt(nonce, plaintext, None)
        return f"{nonce.hex()}:{ciphertext.hex()}"

    def decrypt(self, token: str) -> bytes:
        parts = token.strip().split(":")
        if len(parts) != 2:
            raise DecryptionError("Encrypted store is not in 'nonce:ciphertext' form.")
        try:
            nonce = bytes.fromhex(parts[0])
            ciphertext = bytes.fromhex(parts[1])
        except ValueError as error:
            raise DecryptionError("Encrypted store is not valid hex.") from error
        if len(nonce) != NONCE_BYTES:
            raise DecryptionError("Encrypted store has an invalid nonce.")
        try:
            return self._aead.decrypt(nonce, ciphertext, None)
        except InvalidTag as error:
            raise DecryptionError("Encrypted store failed authentication (wrong key or tampered data).") from error
