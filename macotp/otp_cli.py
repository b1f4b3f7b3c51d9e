#!/usr/bin/env python3
"""
otp_cli.py — CLI wrapper for otp_core.py

Subcommands:
- generate : issue one or more tokens for the configured key
- verify   : check a token, exit 0 if VALID, 1 if INVALID
- demo     : generate, verify, tamper with the last hex digit, verify again

The shared key is supplied by the caller, first match wins:
  --key TEXT | --key-hex HEX | --key-file PATH | $MACOTP_KEY
"""

import argparse
import binascii
import logging
import os
import sys

from macotp import otp_core

logger = logging.getLogger(__name__)

KEY_ENV_VAR = "MACOTP_KEY"
DEMO_KEY = b"supersecretkey123"


class KeyConfigError(Exception):
    """No usable key could be read from the command line or environment."""


# --- Key configuration ---
def load_key(path: str) -> bytes:
    """Read raw key bytes from a file, dropping one trailing newline."""
    with open(path, "rb") as f:
        data = f.read()
    if data.endswith(b"\r\n"):
        data = data[:-2]
    elif data.endswith(b"\n"):
        data = data[:-1]
    return data


def resolve_key(args, environ=None, default: bytes = None) -> bytes:
    if environ is None:
        environ = os.environ

    if args.key is not None:
        key = args.key.encode("utf-8")
    elif args.key_hex is not None:
        try:
            key = binascii.unhexlify(args.key_hex)
        except ValueError as e:
            raise KeyConfigError("--key-hex is not valid hex") from e
    elif args.key_file is not None:
        try:
            key = load_key(args.key_file)
        except OSError as e:
            raise KeyConfigError(f"Cannot read key file: {e}") from e
    elif environ.get(KEY_ENV_VAR):
        key = environ[KEY_ENV_VAR].encode("utf-8")
    elif default is not None:
        logger.debug("No key configured, using the demo key")
        key = default
    else:
        raise KeyConfigError(
            f"No key given. Use --key, --key-hex, --key-file or set {KEY_ENV_VAR}."
        )

    if not key:
        raise KeyConfigError("Key must not be empty")
    return key


def tamper_last_char(token: str) -> str:
    """Replace the last hex digit with "0", or "1" if it already was "0"."""
    replacement = "1" if token[-1] == "0" else "0"
    return token[:-1] + replacement


# --- CLI command handlers ---
def cmd_help(args, parser):
    parser.print_help()
    return 0


def cmd_generate(args, parser):
    key = resolve_key(args)
    if args.count < 1:
        raise ValueError("--count must be at least 1")
    for _ in range(args.count):
        print(otp_core.generate_otp(key))
    logger.debug("Generated %d token(s)", args.count)
    return 0


def cmd_verify(args, parser):
    key = resolve_key(args)
    if otp_core.verify_otp(key, args.token):
        print("VALID")
        return 0
    print("INVALID")
    return 1


def cmd_demo(args, parser):
    key = resolve_key(args, default=DEMO_KEY)

    otp = otp_core.generate_otp(key)
    print(f"Generated OTP (hex): {otp}")

    valid_ok = otp_core.verify_otp(key, otp)
    if valid_ok:
        print("[+] OTP verification succeeded.")
    else:
        print("[-] OTP verification FAILED!")

    tampered = tamper_last_char(otp)
    tampered_ok = otp_core.verify_otp(key, tampered)
    if tampered_ok:
        print("[-] Tampered OTP was accepted, this is a bug!")
    else:
        print("[+] Tampered OTP rejected, as expected.")

    return 0 if valid_ok and not tampered_ok else 1


# --- Argparse builder ---
def _add_key_options(p: argparse.ArgumentParser) -> None:
    group = p.add_mutually_exclusive_group()
    group.add_argument("--key", help="Shared key as UTF-8 text")
    group.add_argument("--key-hex", help="Shared key as hex")
    group.add_argument("--key-file", help="Read the shared key from a file")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="macotp",
        description="nonce||HMAC-SHA256 one-time password generator and verifier",
    )
    p.add_argument("--verbose", action="store_true", help="Verbose output")
    sub = p.add_subparsers(dest="cmd")
    p.set_defaults(func=cmd_help)

    # generate
    pg = sub.add_parser("generate", help="Generate OTP token(s)")
    _add_key_options(pg)
    pg.add_argument("--count", type=int, default=1, help="Number of tokens to print")
    pg.set_defaults(func=cmd_generate)

    # verify
    pv = sub.add_parser("verify", help="Verify an OTP token")
    _add_key_options(pv)
    pv.add_argument("token", help="96-char hex token")
    pv.set_defaults(func=cmd_verify)

    # demo
    pd = sub.add_parser("demo", help="Generate, verify and tamper with a token")
    _add_key_options(pd)
    pd.set_defaults(func=cmd_demo)

    return p


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(levelname)s] %(message)s",
    )
    try:
        return args.func(args, parser)
    except KeyConfigError as e:
        print(f"[!] {e}", file=sys.stderr)
        return 2
    except (otp_core.OTPError, ValueError) as e:
        print(f"[!] {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
