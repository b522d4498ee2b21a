#!/usr/bin/env python3
"""
Create the seed admin user in the JSON data file.

Usage:
  python scripts/seed_admin.py [--data-file ./db.json]
"""
from __future__ import annotations

import argparse
import sys

from noticeboard.core.config import get_settings
from noticeboard.repositories.json_storage import JsonStorage
from noticeboard.services.auth_service import AuthService
from noticeboard.services.session_service import SessionStore


def main() -> None:
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Seed the admin user")
    ap.add_argument("--data-file", default=settings.data_file, help="JSON document path (default: DATA_FILE)")
    args = ap.parse_args()

    storage = JsonStorage(args.data_file)
    auth = AuthService(storage, SessionStore(settings.session_ttl_seconds), settings)
    user = auth.bootstrap_admin()
    print("OK: admin ready")
    print(f"  ID: {user.id}")
    print(f"  Email: {user.email or '-'}")
    print(f"  File: {storage.path}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
