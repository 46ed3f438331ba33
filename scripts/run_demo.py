#!/usr/bin/env python3
"""
Reset the database, save "John Doe" with tags A/B/C, list, clear the tags and list again.

Usage:
  python scripts/run_demo.py [--materialize] [--policy replace_all|keep_unloaded]
"""
from __future__ import annotations

import argparse
import sys

from tagclear.core.log import configure_logging
from tagclear.domain.reconcile import POLICIES
from tagclear.repositories.sql_repository import SQLRepository
from tagclear.services.demo_service import DemoService


def main() -> None:
    ap = argparse.ArgumentParser(description="Replace a user's tag collection and show what survives")
    ap.add_argument(
        "--materialize",
        action="store_true",
        help="Load the tags before replacing them (default: replace without loading)",
    )
    ap.add_argument(
        "--policy",
        choices=sorted(POLICIES),
        help="Policy for replacing a collection that was never loaded (default: UNLOADED_COLLECTION_POLICY)",
    )
    args = ap.parse_args()

    configure_logging()
    service = DemoService(SQLRepository(policy=args.policy))
    service.run(materialize=args.materialize)


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover
        sys.stderr.write(f"Erro: {exc}\n")
        raise SystemExit(1)
