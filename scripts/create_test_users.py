#!/usr/bin/env python3
"""
Create the demo admin, carrier and shipper accounts.

Usage:
    python scripts/create_test_users.py

Safe to re-run: existing accounts are reported and left untouched.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

# Add project root to path so the package imports without installation
sys.path.insert(0, str(Path(__file__).parent.parent))

from freight_portal.core.config import get_settings
from freight_portal.core.logging import setup_logging
from freight_portal.domain.services.seeding import TEST_PASSWORD, seed_test_users
from freight_portal.infrastructure.db.session import dispose_engine, get_session_factory


async def main() -> None:
    setup_logging(get_settings().log_level, json_logs=False)
    session_factory = get_session_factory()
    try:
        async with session_factory() as session:
            report = await seed_test_users(session)
    finally:
        await dispose_engine()

    print("=" * 60)
    for email, state in report.items():
        print(f"{state:>8}  {email}")
    print("=" * 60)
    print(f"Password for all test accounts: {TEST_PASSWORD}")


if __name__ == "__main__":
    asyncio.run(main())
