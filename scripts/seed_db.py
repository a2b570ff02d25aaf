from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from config import get_settings_module

from zencorp.database.bootstrap import DEMO_ACCOUNTS, apply_seed_sql, ensure_demo_accounts
from zencorp.logging_setup import setup_logging

logger = logging.getLogger("zencorp.scripts.seed_db")


def main() -> None:
    setup_logging()
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    ensure_demo_accounts(db_config)

    logger.info("Seeded %s with %d demo accounts", db_config.get("database"), len(DEMO_ACCOUNTS))
    for _, _, username, password, role, _ in DEMO_ACCOUNTS:
        logger.info("  %-10s %-10s / %s", role, username, password)


if __name__ == "__main__":
    main()
