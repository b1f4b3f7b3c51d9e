#!/usr/bin/env python3
"""
otp_core.py — Core library for nonce||HMAC-SHA256 one-time passwords.

Scope:
- Pure functions for generating and verifying tokens, meant to be called
  directly by an application or wrapped in whatever transport it controls.
- No argparse / CLI loop here; see otp_cli.py for that.
- No process-wide state: the shared key is always passed in explicitly.

Token format:
    token = hex(nonce[16 bytes]) || hex(HMAC-SHA256(key, nonce)[32 bytes])
    len(token) == 96, lowercase hex on output

Security notes:
- The nonce comes from os.urandom (CSPRNG). If the OS cannot deliver it,
  generation fails loudly instead of falling back to weak bytes.
- Tags are compared with hmac.compare_digest (constant time).
- verify_otp() only ever answers True/False so a caller probing the
  verifier cannot tell a malformed token from a wrong key.
- Single-use enforcement is left to the caller.
"""

from typing import Tuple
import binascii
import hashlib
import hmac
import logging
import os

logger = logging.getLogger(__name__)

# --- Config / constants ----------------------------------------------------
NONCE_BYTES = 16            # R
TAG_BYTES = 32              # HMAC-SHA256 digest size
NONCE_HEX_LENGTH = NONCE_BYTES * 2
TAG_HEX_LENGTH = TAG_BYTES * 2
TOKEN_LENGTH = NONCE_HEX_LENGTH + TAG_HEX_LENGTH   # 96


# --- Errors ----------------------------------------------------------------
class OTPError(Exception):
    """Base class for every error raised by this package."""


class RandomSourceError(OTPError):
    """The OS entropy source could not supply the nonce bytes."""


class InvalidFormat(OTPError, ValueError):
    """Token is not 96 hexadecimal characters."""


class MacMismatch(OTPError):
    """Token decoded fine but its tag does not match the recomputed one."""


# --- Primitives ------------------------------------------------------------
def generate_nonce(length: int = NONCE_BYTES) -> bytes:
    """
    Return `length` bytes from the OS CSPRNG.

    Arguments:
        length: number of bytes (default NONCE_BYTES = 16)

    Raises:
        ValueError: if length is not positive
        RandomSourceError: if os.urandom fails or returns a short read
    """
    if length <= 0:
        raise ValueError("Nonce length must be positive")
    try:
        raw = os.urandom(length)
    except (OSError, NotImplementedError) as e:
        raise RandomSourceError("Entropy source unavailable") from e
    if len(raw) != length:
        raise RandomSourceError(
            f"Entropy source returned {len(raw)} bytes, expected {length}"
        )
    return raw


def _check_key(key: bytes) -> bytes:
    if not isinstance(key, (bytes, bytearray)):
        raise TypeError("Key must be bytes")
    if not key:
        raise ValueError("Key must not be empty")
    return bytes(key)


def compute_mac(key: bytes, message: bytes) -> bytes:
    """
    HMAC-SHA256(key, message), 32 raw bytes.

    Deterministic for a given (key, message). Keys longer than the SHA-256
    block size are hashed down by hmac itself.

    Raises:
        TypeError: if key is not bytes
        ValueError: if key is empty
    """
    key = _check_key(key)
    return hmac.new(key, bytes(message), hashlib.sha256).digest()


def constant_time_equal(a: bytes, b: bytes) -> bool:
    """Timing-safe equality check (wraps hmac.compare_digest)."""
    return hmac.compare_digest(a, b)


# --- Token encoding --------------------------------------------------------
def encode_token(nonce: bytes, tag: bytes) -> str:
    """
    Render nonce||tag as a 96-char lowercase hex string, nonce first.

    Raises:
        ValueError: if nonce or tag has the wrong size
    """
    if len(nonce) != NONCE_BYTES:
        raise ValueError(f"Nonce must be {NONCE_BYTES} bytes, got {len(nonce)}")
    if len(tag) != TAG_BYTES:
        raise ValueError(f"Tag must be {TAG_BYTES} bytes, got {len(tag)}")
    return bytes(nonce).hex() + bytes(tag).hex()


def _unhex(part: str, what: str) -> bytes:
    try:
        return binascii.unhexlify(part)
    except ValueError as e:
        # binascii.Error is a ValueError; non-ASCII str raises plain ValueError
        raise InvalidFormat(f"{what} is not valid hex") from e


def decode_token(token: str) -> Tuple[bytes, bytes]:
    """
    Split a token back into (nonce, tag).

    Steps:
    1. Length check: exactly TOKEN_LENGTH chars, nothing parsed otherwise
    2. First 32 chars -> nonce hex, remaining 64 -> tag hex
    3. Hex-decode each half independently

    Raises:
        InvalidFormat: wrong type, wrong length, or non-hex characters
    """
    if not isinstance(token, str):
        raise InvalidFormat("Token must be a string")
    if len(token) != TOKEN_LENGTH:
        raise InvalidFormat(
            f"Token length {len(token)} does not match expected {TOKEN_LENGTH}"
        )
    nonce = _unhex(token[:NONCE_HEX_LENGTH], "Nonce")
    tag = _unhex(token[NONCE_HEX_LENGTH:], "Tag")
    return nonce, tag


# --- Generate / verify -----------------------------------------------------
def generate_otp(key: bytes) -> str:
    """
    Issue a fresh token for `key`: nonce -> HMAC -> hex.

    Arguments:
        key: shared secret (non-empty bytes)

    Returns:
        str: 96-char lowercase hex token

    Raises:
        RandomSourceError: if no nonce could be drawn
    """
    key = _check_key(key)
    nonce = generate_nonce(NONCE_BYTES)
    tag = compute_mac(key, nonce)
    return encode_token(nonce, tag)


def check_otp(key: bytes, token: str) -> None:
    """
    Strict verification; returns None on success.

    Unlike verify_otp() this tells the failures apart, which is useful
    for tests and internal diagnostics. Do not expose the difference to
    whoever submitted the token.

    Raises:
        InvalidFormat: token is malformed
        MacMismatch: token is well-formed but the tag is wrong
    """
    key = _check_key(key)
    nonce, tag = decode_token(token)
    expected = compute_mac(key, nonce)
    if not constant_time_equal(tag, expected):
        raise MacMismatch("Tag does not match")


def verify_otp(key: bytes, token: str) -> bool:
    """
    Public verifier: True iff the token is well-formed and its tag matches
    HMAC-SHA256(key, nonce).

    Every token-side failure collapses to False. A key of the wrong type or
    an empty key still raises, that is a bug in the caller.
    """
    try:
        check_otp(key, token)
    except (InvalidFormat, MacMismatch) as e:
        logger.debug("OTP rejected: %s", type(e).__name__)
        return False
    return True


# Logical interface names
generate = generate_otp
verify = verify_otp


if __name__ == "__main__":
    print("otp_core.py is a library module. Use otp_cli.py for the command line.")
