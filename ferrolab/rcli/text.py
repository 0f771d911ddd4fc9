"""Signing, verifying, key generation and encryption of text."""

from __future__ import annotations

import hmac
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from cryptography.exceptions import InvalidSignature, InvalidTag
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
)

from .b64 import Base64Format, _b64_decode, _b64_encode
from .blake3 import keyed_hash
from .genpass import generate_password
from .inputs import read_input

BLAKE3_KEY_LEN = 32
ED25519_KEY_LEN = 32
ED25519_SIG_LEN = 64
CHACHA_KEY_LEN = 32
CHACHA_NONCE_LEN = 12


class TextSignFormat(Enum):
    """The signature scheme to use."""

    BLAKE3 = "blake3"
    ED25519 = "ed25519"

    @classmethod
    def parse(cls, value: str) -> TextSignFormat:
        """Return the scheme named by ``value``."""
        try:
            return cls(value)
        except ValueError:
            raise ValueError("Invalid format") from None

    def __str__(self) -> str:
        return self.value


def _payload(data) -> bytes:
    if hasattr(data, "read"):
        return data.read()
    return bytes(data)


@dataclass(frozen=True)
class Blake3Signer:
    """Signs and verifies with a keyed BLAKE3 hash."""

    key: bytes

    def __post_init__(self) -> None:
        key = bytes(self.key)
        if len(key) != BLAKE3_KEY_LEN:
            raise ValueError(f"blake3 key must be {BLAKE3_KEY_LEN} bytes")
        object.__setattr__(self, "key", key)

    @classmethod
    def load(cls, path: str | os.PathLike) -> Blake3Signer:
        """Read a key file; the first 32 bytes of its trimmed text are the key."""
        raw = Path(path).read_text(encoding="utf-8").strip().encode("utf-8")
        if len(raw) < BLAKE3_KEY_LEN:
            raise ValueError(f"blake3 key must be at least {BLAKE3_KEY_LEN} bytes")
        return cls(raw[:BLAKE3_KEY_LEN])

    def sign(self, data) -> bytes:
        """Return the keyed hash of ``data`` (bytes or a binary stream)."""
        return keyed_hash(self.key, _payload(data))

    def verify(self, data, sig) -> bool:
        """Return whether ``sig`` is the keyed hash of ``data``."""
        return hmac.compare_digest(self.sign(data), bytes(sig))

    @classmethod
    def generate(cls) -> list[bytes]:
        """Return a new random key, as the single item of a list."""
        return [generate_password(BLAKE3_KEY_LEN, True, True, True, True).encode("ascii")]


class Ed25519Signer:
    """Signs with an Ed25519 private key."""

    def __init__(self, key: bytes) -> None:
        key = bytes(key)
        if len(key) != ED25519_KEY_LEN:
            raise ValueError(f"ed25519 private key must be {ED25519_KEY_LEN} bytes")
        self._key = Ed25519PrivateKey.from_private_bytes(key)

    @classmethod
    def load(cls, path: str | os.PathLike) -> Ed25519Signer:
        """Read a raw 32-byte private key file."""
        return cls(Path(path).read_bytes())

    def sign(self, data) -> bytes:
        """Return the 64-byte signature of ``data``."""
        return self._key.sign(_payload(data))

    @classmethod
    def generate(cls) -> list[bytes]:
        """Return a new ``[private key, public key]`` pair of raw bytes."""
        private = Ed25519PrivateKey.generate()
        secret_bytes = private.private_bytes(Encoding.Raw, PrivateFormat.Raw, NoEncryption())
        public_bytes = private.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
        return [secret_bytes, public_bytes]


class Ed25519Verifier:
    """Verifies Ed25519 signatures with a public key."""

    def __init__(self, key: bytes) -> None:
        key = bytes(key)
        if len(key) != ED25519_KEY_LEN:
            raise ValueError(f"ed25519 public key must be {ED25519_KEY_LEN} bytes")
        self._key = Ed25519PublicKey.from_public_bytes(key)

    @classmethod
    def load(cls, path: str | os.PathLike) -> Ed25519Verifier:
        """Read a raw 32-byte public key file."""
        return cls(Path(path).read_bytes())

    def verify(self, data, sig) -> bool:
        """Return whether ``sig`` is a valid signature of ``data``."""
        sig = bytes(sig)
        if len(sig) != ED25519_SIG_LEN:
            raise ValueError(f"ed25519 signature must be {ED25519_SIG_LEN} bytes")
        try:
            self._key.verify(sig, _payload(data))
        except InvalidSignature:
            return False
        return True


def sign_text(
    input_path: str | os.PathLike,
    key_path: str | os.PathLike,
    fmt: TextSignFormat = TextSignFormat.BLAKE3,
) -> str:
    """Sign the input and return the signature as unpadded URL-safe base64."""
    data = read_input(input_path)
    if fmt is TextSignFormat.BLAKE3:
        signature = Blake3Signer.load(key_path).sign(data)
    else:
        signature = Ed25519Signer.load(key_path).sign(data)
    return _b64_encode(signature, Base64Format.URL_SAFE)


def verify_text(
    input_path: str | os.PathLike,
    key_path: str | os.PathLike,
    sig: str,
    fmt: TextSignFormat = TextSignFormat.BLAKE3,
) -> bool:
    """Return whether ``sig`` (unpadded URL-safe base64) signs the input."""
    data = read_input(input_path)
    signature = _b64_decode(sig, Base64Format.URL_SAFE)
    if fmt is TextSignFormat.BLAKE3:
        return Blake3Signer.load(key_path).verify(data, signature)
    return Ed25519Verifier.load(key_path).verify(data, signature)


def generate_key(fmt: TextSignFormat, output: str | os.PathLike) -> list[Path]:
    """Write new key files into the directory ``output`` and return their paths."""
    directory = Path(output)
    if fmt is TextSignFormat.BLAKE3:
        (key,) = Blake3Signer.generate()
        path = directory / "blake3.txt"
        path.write_bytes(key)
        return [path]
    private, public = Ed25519Signer.generate()
    private_path = directory / "ed25519.sk"
    public_path = directory / "ed25519.pk"
    private_path.write_bytes(private)
    public_path.write_bytes(public)
    return [private_path, public_path]


def _load_cipher(
    key_path: str | os.PathLike, nonce_path: str | os.PathLike
) -> tuple[ChaCha20Poly1305, bytes]:
    key = Path(key_path).read_text(encoding="utf-8").strip().encode("utf-8")
    nonce = Path(nonce_path).read_text(encoding="utf-8").strip().encode("utf-8")
    if len(key) != CHACHA_KEY_LEN:
        raise ValueError(f"encryption key must be {CHACHA_KEY_LEN} bytes")
    if len(nonce) != CHACHA_NONCE_LEN:
        raise ValueError(f"nonce must be {CHACHA_NONCE_LEN} bytes")
    return ChaCha20Poly1305(key), nonce


def encrypt_text(
    input_path: str | os.PathLike,
    key_path: str | os.PathLike,
    nonce_path: str | os.PathLike,
) -> str:
    """Encrypt the input text with ChaCha20-Poly1305 and return standard base64."""
    text = read_input(input_path).decode("utf-8")
    cipher, nonce = _load_cipher(key_path, nonce_path)
    ciphertext = cipher.encrypt(nonce, text.encode("utf-8"), None)
    return _b64_encode(ciphertext, Base64Format.STANDARD)


def decrypt_text(
    key_path: str | os.PathLike, nonce_path: str | os.PathLike, ciphertext: str
) -> bytes:
    """Decrypt standard-base64 ciphertext; a failed authentication gives ``b""``."""
    decoded = _b64_decode(ciphertext, Base64Format.STANDARD)
    cipher, nonce = _load_cipher(key_path, nonce_path)
    try:
        return cipher.decrypt(nonce, decoded, None)
    except InvalidTag:
        return b""