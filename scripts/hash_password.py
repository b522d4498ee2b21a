#!/usr/bin/env python3
"""
Print an Argon2 hash for ADMIN_PASSWORD_HASH.

Usage:
  python scripts/hash_password.py                 (prompts for the password)
  python scripts/hash_password.py --password "s3cret-passw0rd"
"""
from __future__ import annotations

import argparse
import getpass
import sys

from noticeboard.core.security import hash_password, verify_password


def main() -> None:
    ap = argparse.ArgumentParser(description="Hash an admin password for ADMIN_PASSWORD_HASH")
    ap.add_argument("--password", help="Password to hash (default: prompt)")
    args = ap.parse_args()

    password = args.password or getpass.getpass("Admin password: ")
    if len(password) < 8:
        raise SystemExit("Password too short (minimum 8 characters)")
    hashed = hash_password(password)
    if not verify_password(password, hashed):
        raise SystemExit("Hash verification failed")
    print(f"ADMIN_PASSWORD_HASH='{hashed}'")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
