#!/usr/bin/env python3
"""
sealkit command line

Usage:
    sealkit genkey
    sealkit encrypt --key <64 hex chars> "Top secret message"
    echo '{"data": ..., "iv": ..., "tag": ...}' | sealkit decrypt --key <hex>
    sealkit sign --secret s3cret --ttl 3600 '{"sub": "12345"}'
    sealkit verify --secret s3cret <token>

SEALKIT_KEY and SEALKIT_SECRET are used when --key / --secret are omitted.
"""

import argparse
import json
import logging
import sys
import time
from typing import List, Optional

from . import config
from .aes_gcm import decrypt, encrypt, generate_key
from .errors import InvalidClaims, SealkitError
from .jwt_codec import sign, verify
from .models import Envelope

logger = logging.getLogger(__name__)


def _read_input(value: Optional[str]) -> str:
    """Positional argument, or all of stdin when omitted."""
    return value if value is not None else sys.stdin.read()


def cmd_genkey(args: argparse.Namespace) -> str:
    return generate_key()


def cmd_encrypt(args: argparse.Namespace) -> str:
    return encrypt(_read_input(args.text), args.key).to_json()


def cmd_decrypt(args: argparse.Namespace) -> str:
    envelope = Envelope.from_json(_read_input(args.envelope))
    return decrypt(envelope, args.key)


def cmd_sign(args: argparse.Namespace) -> str:
    try:
        claims = json.loads(_read_input(args.claims))
    except ValueError as e:
        raise InvalidClaims(f"Claims are not valid JSON: {e}")
    if args.ttl is not None and isinstance(claims, dict):
        claims["exp"] = int(time.time()) + args.ttl
    return sign(claims, args.secret)


def cmd_verify(args: argparse.Namespace) -> str:
    claims = verify(_read_input(args.token).strip(), args.secret)
    return json.dumps(claims, ensure_ascii=False)


def build_parser() -> argparse.ArgumentParser:
    # Accepted before or after the command name
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--log-level", default=argparse.SUPPRESS, help="Log level (default: SEALKIT_LOG_LEVEL or WARNING)")

    parser = argparse.ArgumentParser(
        prog="sealkit",
        description="AES-256-GCM envelopes and HS256 compact tokens",
        parents=[common],
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("genkey", help="Print a random 256-bit key as hex", parents=[common])
    p.set_defaults(func=cmd_genkey)

    p = sub.add_parser("encrypt", help="Encrypt text into an envelope (JSON)", parents=[common])
    p.add_argument("--key", "-k", default=config.DEFAULT_KEY, help="32-byte key as hex (default: SEALKIT_KEY)")
    p.add_argument("text", nargs="?", help="Plaintext (default: stdin)")
    p.set_defaults(func=cmd_encrypt, needs="key")

    p = sub.add_parser("decrypt", help="Decrypt an envelope (JSON)", parents=[common])
    p.add_argument("--key", "-k", default=config.DEFAULT_KEY, help="32-byte key as hex (default: SEALKIT_KEY)")
    p.add_argument("envelope", nargs="?", help="Envelope JSON (default: stdin)")
    p.set_defaults(func=cmd_decrypt, needs="key")

    p = sub.add_parser("sign", help="Sign JSON claims into a token", parents=[common])
    p.add_argument("--secret", "-s", default=config.DEFAULT_SECRET, help="HMAC secret (default: SEALKIT_SECRET)")
    p.add_argument("--ttl", type=int, default=None, help="Set exp to now + TTL seconds")
    p.add_argument("claims", nargs="?", help="Claims JSON object (default: stdin)")
    p.set_defaults(func=cmd_sign, needs="secret")

    p = sub.add_parser("verify", help="Verify a token and print its claims", parents=[common])
    p.add_argument("--secret", "-s", default=config.DEFAULT_SECRET, help="HMAC secret (default: SEALKIT_SECRET)")
    p.add_argument("token", nargs="?", help="Compact token (default: stdin)")
    p.set_defaults(func=cmd_verify, needs="secret")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config.setup_logging(getattr(args, "log_level", None))
    except ValueError as e:
        parser.error(str(e))

    needs = getattr(args, "needs", None)
    if needs and not getattr(args, needs):
        parser.error(f"--{needs} is required (or set SEALKIT_{needs.upper()})")

    try:
        output = args.func(args)
    except SealkitError as e:
        logger.debug(f"{args.command} failed: {e.code}")
        print(f"error: {e.code}: {e}", file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
