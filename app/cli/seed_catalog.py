# =============================================
# File: app/cli/seed_catalog.py
# Purpose: CLI entrypoint to create tables, seed the sample catalog and grant admin roles.
# Usage:
#   python -m app.cli.seed_catalog --force --grant-admin <user-id>
# =============================================
from __future__ import annotations
import argparse
import sys

from sqlmodel import Session

from app.db.repo import engine, init_db
from app.services.admin import grant_role
from app.services.seeding import seed_catalog

def main(argv=None):
    ap = argparse.ArgumentParser(description="Create tables and seed the LuxeAura sample catalog.")
    ap.add_argument("--force", action="store_true", help="Drop existing products (and rows that reference them) first")
    ap.add_argument("--grant-admin", metavar="USER_ID", action="append", default=[],
                    help="Give USER_ID the admin role (repeatable)")
    ap.add_argument("--no-seed", action="store_true", help="Only create tables / grant roles")
    args = ap.parse_args(argv)

    init_db()
    with Session(engine) as session:
        if not args.no_seed:
            cats, prods = seed_catalog(session, force=args.force)
            if prods == 0:
                print("[SKIP] Products already exist (use --force to reseed).", file=sys.stderr)
            else:
                print(f"[OK] Seeded {cats} categories and {prods} products.")
        for uid in args.grant_admin:
            grant_role(session, uid)
            print(f"[OK] Granted admin to {uid}")

if __name__ == "__main__":
    main()
