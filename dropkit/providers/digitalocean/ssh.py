"""OpenSSH public key codec and key pair generation.

Public keys travel as single ``"<type> <base64> [comment]"`` lines. The
base64 payload is a sequence of length-prefixed fields (big-endian 32-bit
length, then the bytes): the key type, then the key's integers in
two's-complement form.

Only ``ssh-rsa`` and ``ssh-dss`` keys are supported.
"""

from __future__ import annotations

import base64
import binascii
import struct
from dataclasses import dataclass

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import dsa, rsa

from dropkit.core.exceptions import KeyFormatError

type PublicKey = rsa.RSAPublicKey | dsa.DSAPublicKey

SSH_RSA = "ssh-rsa"
SSH_DSS = "ssh-dss"
COMMENT = "user@host"

# Both key types start with a 4-byte length of 7, which base64-encodes to "AAAA".
_PAYLOAD_PREFIX = "AAAA"


# =============================================================================
# Wire Helpers
# =============================================================================


class _Reader:
    __slots__ = ("_data", "_pos")

    def __init__(self, data: bytes) -> None:
        self._data = data
        self._pos = 0

    def field(self) -> bytes:
        if self._pos + 4 > len(self._data):
            raise KeyFormatError("Truncated key: missing field length")
        (length,) = struct.unpack_from(">I", self._data, self._pos)
        self._pos += 4
        end = self._pos + length
        if end > len(self._data):
            raise KeyFormatError("Truncated key: field shorter than its length")
        value = self._data[self._pos:end]
        self._pos = end
        return value

    def text(self) -> str:
        return self.field().decode("ascii", errors="replace")

    def integer(self) -> int:
        return int.from_bytes(self.field(), "big", signed=True)


def _field(value: bytes) -> bytes:
    return struct.pack(">I", len(value)) + value


def _integer(value: int) -> bytes:
    # Minimal two's-complement, always keeping room for the sign bit.
    return _field(value.to_bytes(value.bit_length() // 8 + 1, "big", signed=True))


# =============================================================================
# Codec
# =============================================================================


def decode_public_key(line: str) -> PublicKey:
    """Parse an OpenSSH public key line into a key object."""
    payload = next((part for part in line.split(" ") if part.startswith(_PAYLOAD_PREFIX)), None)
    if payload is None:
        raise KeyFormatError("No Base64 part to decode")

    try:
        data = base64.b64decode(payload.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise KeyFormatError(f"Invalid Base64 key payload: {e}") from e

    reader = _Reader(data)
    key_type = reader.text()

    try:
        match key_type:
            case "ssh-rsa":
                e = reader.integer()
                n = reader.integer()
                return rsa.RSAPublicNumbers(e, n).public_key()
            case "ssh-dss":
                p = reader.integer()
                q = reader.integer()
                g = reader.integer()
                y = reader.integer()
                return dsa.DSAPublicNumbers(y, dsa.DSAParameterNumbers(p, q, g)).public_key()
            case _:
                raise KeyFormatError(f"Unknown type: {key_type}")
    except (ValueError, TypeError) as e:
        raise KeyFormatError(f"Invalid {key_type} key: {e}") from e


def _algorithm(key: object) -> str:
    name = type(key).__name__
    return name.removeprefix("_").removesuffix("PublicKey") or name


def encode_public_key(key: PublicKey) -> str:
    """Render a key object as an OpenSSH public key line."""
    match key:
        case rsa.RSAPublicKey():
            numbers = key.public_numbers()
            key_type = SSH_RSA
            payload = _field(SSH_RSA.encode()) + _integer(numbers.e) + _integer(numbers.n)
        case dsa.DSAPublicKey():
            numbers = key.public_numbers()
            params = numbers.parameter_numbers
            key_type = SSH_DSS
            payload = (
                _field(SSH_DSS.encode())
                + _integer(params.p)
                + _integer(params.q)
                + _integer(params.g)
                + _integer(numbers.y)
            )
        case _:
            raise KeyFormatError(f"Unknown public key encoding: {_algorithm(key)}")

    return f"{key_type} {base64.b64encode(payload).decode('ascii')} {COMMENT}"


def same_public_key(a: PublicKey, b: PublicKey) -> bool:
    """Compare two keys by their public components."""
    match a, b:
        case rsa.RSAPublicKey(), rsa.RSAPublicKey():
            return a.public_numbers() == b.public_numbers()
        case dsa.DSAPublicKey(), dsa.DSAPublicKey():
            return a.public_numbers() == b.public_numbers()
        case _:
            return False


# =============================================================================
# Key Pair Generation
# =============================================================================


@dataclass(frozen=True, slots=True)
class KeyPair:
    """A freshly generated key pair in the forms the API and SSH clients need."""

    public_key: PublicKey
    public_openssh: str
    private_pem: str

    def __repr__(self) -> str:
        return f"KeyPair(public_openssh={self.public_openssh[:24]!r}..., private_pem=***)"


def generate_rsa_key_pair(bits: int = 2048) -> KeyPair:
    """Generate an RSA key pair locally."""
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=bits)
    public_key = private_key.public_key()
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")
    return KeyPair(
        public_key=public_key,
        public_openssh=encode_public_key(public_key),
        private_pem=private_pem,
    )


__all__ = [
    "COMMENT",
    "KeyPair",
    "PublicKey",
    "SSH_DSS",
    "SSH_RSA",
    "decode_public_key",
    "encode_public_key",
    "generate_rsa_key_pair",
    "same_public_key",
]
