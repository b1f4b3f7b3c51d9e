"""
macotp package
==============

Shared-secret one-time passwords built from a random nonce and an
HMAC-SHA256 tag over it.

──────────────────────────────────────────────
Core algorithm
──────────────────────────────────────────────
- Generate:
  R     = os.urandom(16)
  MAC   = HMAC-SHA256(key, R)
  token = hex(R) || hex(MAC)          → 96 lowercase hex chars

- Verify:
  split token 32/64 → R, MAC
  accept iff compare_digest(MAC, HMAC-SHA256(key, R))
  → any malformed token, wrong key or wrong nonce is just False.

──────────────────────────────────────────────
Notes for integrators
──────────────────────────────────────────────
- The key is always passed in; the package stores nothing.
- A token can be verified any number of times. If it must be single-use,
  keep a seen-token set on your side.
- generate_otp() raises RandomSourceError if the OS has no entropy to give;
  retrying is up to you.

──────────────────────────────────────────────
Quick example
──────────────────────────────────────────────
>>> from macotp import generate_otp, verify_otp
>>> key = b"supersecretkey123"
>>> token = generate_otp(key)
>>> len(token)
96
>>> verify_otp(key, token)
True
"""
from macotp.otp_core import (
    NONCE_BYTES,
    TAG_BYTES,
    TOKEN_LENGTH,
    OTPError,
    RandomSourceError,
    InvalidFormat,
    MacMismatch,
    generate_nonce,
    compute_mac,
    constant_time_equal,
    encode_token,
    decode_token,
    generate_otp,
    check_otp,
    verify_otp,
    generate,
    verify,
)

__version__ = "0.1.0"

__all__ = [
    "NONCE_BYTES",
    "TAG_BYTES",
    "TOKEN_LENGTH",
    "OTPError",
    "RandomSourceError",
    "InvalidFormat",
    "MacMismatch",
    "generate_nonce",
    "compute_mac",
    "constant_time_equal",
    "encode_token",
    "decode_token",
    "generate_otp",
    "check_otp",
    "verify_otp",
    "generate",
    "verify",
]
