#!/usr/bin/env python3
"""
Drop and recreate the users/tags schema. All data is lost.

Usage:
  python scripts/reset_db.py
"""
from __future__ import annotations

import sys

from tagclear.core.log import configure_logging
from tagclear.repositories.sql_repository import SQLRepository
from tagclear.services.demo_service import RESET_MESSAGE


def main() -> None:
    configure_logging()
    SQLRepository().reset_schema()
    print(RESET_MESSAGE)


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover
        sys.stderr.write(f"Erro: {exc}\n")
        raise SystemExit(1)
