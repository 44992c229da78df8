#!/usr/bin/env python3
"""
Reset a client's or provider's password in the CleanConnect SQLite database.

This script DOES NOT read or reveal any existing passwords. It sets a new
bcrypt hash, produced exactly as the API does at registration, for the
account with the given email in the chosen store.

Usage:
    python reset_password.py --db ./cleanconnect_api/cleanconnect.db --role provider --email dana@ex.com --password "NewStrongPass!234"

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import getpass
import os
import sqlite3
import sys

from cleanconnect_api.app.core.security import hash_password


TABLES = {"client": "clients", "provider": "providers"}
MIN_PASSWORD_LENGTH = 6


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Reset a CleanConnect account password (SQLite).")
    ap.add_argument("--db", required=True, help="Path to SQLite DB file (e.g., ./cleanconnect_api/cleanconnect.db)")
    ap.add_argument("--role", required=True, choices=sorted(TABLES), help="Store holding the account")
    ap.add_argument("--email", required=True, help="Account email to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    args = ap.parse_args(argv)

    if not os.path.exists(args.db):
        print(f"[!] DB not found: {args.db}", file=sys.stderr)
        return 1

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if len(new_password) < MIN_PASSWORD_LENGTH:
        print(f"[!] Password must be at least {MIN_PASSWORD_LENGTH} characters.", file=sys.stderr)
        return 1

    email = args.email.strip().lower()
    table = TABLES[args.role]
    conn = sqlite3.connect(args.db)
    try:
        cur = conn.cursor()
        cur.execute(f"SELECT id FROM {table} WHERE email = ?", (email,))
        if not cur.fetchone():
            print(f"[!] No {args.role} found with email: {email}", file=sys.stderr)
            return 2
        cur.execute(f"UPDATE {table} SET password = ? WHERE email = ?", (hash_password(new_password), email))
        conn.commit()
        print(f"[+] Password updated for {args.role}: {email}")
    finally:
        conn.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
