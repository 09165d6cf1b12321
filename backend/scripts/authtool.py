#!/usr/bin/env python3
"""
Chirpy auth toolbox

Command-line access to the authentication core for debugging and for
producing test fixtures:
1. genhash       — hash a password into a bcrypt credential
2. checkpwdhash  — check a password against a credential
3. makejwt       — mint a token for a user ID
4. validatejwt   — validate a token and print its subject

Every failure exits non-zero with the reason on stderr.
"""

import argparse
import sys
import uuid
from datetime import timedelta
from pathlib import Path
from typing import Optional, Sequence

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
from auth import AuthError, PasswordHasher, TokenService  # noqa: E402
from config import settings  # noqa: E402

DEFAULT_EXPIRES_IN_MINUTES = 5


def cmd_genhash(args: argparse.Namespace) -> int:
    hashed = PasswordHasher(cost=settings.BCRYPT_COST).hash(args.password)
    print(f'"{args.password}"')
    print("→")
    print(f'"{hashed}"')
    return 0


def cmd_checkpwdhash(args: argparse.Namespace) -> int:
    PasswordHasher(cost=settings.BCRYPT_COST).verify(args.hash, args.password)
    print("match")
    return 0


def cmd_makejwt(args: argparse.Namespace) -> int:
    if args.user_id == "gen":
        user_id = uuid.uuid4()
    else:
        try:
            user_id = uuid.UUID(args.user_id)
        except ValueError:
            print(f"invalid UUID: {args.user_id}", file=sys.stderr)
            return 1

    token = TokenService(issuer=settings.JWT_ISSUER).mint(
        user_id, args.secret, timedelta(minutes=args.expires_in)
    )
    print(f"UUID: {user_id}")
    print(f"expires in: {args.expires_in}m")
    print("→")
    print(f"JWT: '{token}'")
    return 0


def cmd_validatejwt(args: argparse.Namespace) -> int:
    user_id = TokenService(issuer=settings.JWT_ISSUER).validate(args.token, args.secret)
    print(f"UUID: {user_id}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Chirpy auth toolbox — hash passwords, mint and validate tokens",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/authtool.py genhash 'hunter2'
  python scripts/authtool.py checkpwdhash '$2a$10$...' 'hunter2'
  python scripts/authtool.py makejwt gen s3cret 10
  python scripts/authtool.py validatejwt eyJhbGciOi... s3cret
        """,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("genhash", help="Hash a password")
    p.add_argument("password")
    p.set_defaults(func=cmd_genhash)

    p = sub.add_parser("checkpwdhash", help="Check a password against a hash")
    p.add_argument("hash")
    p.add_argument("password")
    p.set_defaults(func=cmd_checkpwdhash)

    p = sub.add_parser("makejwt", help="Mint a JWT")
    p.add_argument("user_id", metavar="UUID", help="User ID, or 'gen' for a random one")
    p.add_argument("secret")
    p.add_argument(
        "expires_in", metavar="EXPIRES_IN_MINUTES", type=int, nargs="?",
        default=DEFAULT_EXPIRES_IN_MINUTES,
        help=f"Token lifetime in minutes (default: {DEFAULT_EXPIRES_IN_MINUTES})",
    )
    p.set_defaults(func=cmd_makejwt)

    p = sub.add_parser("validatejwt", help="Validate a JWT and print its subject")
    p.add_argument("token")
    p.add_argument("secret")
    p.set_defaults(func=cmd_validatejwt)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except AuthError as exc:
        print(str(exc), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
