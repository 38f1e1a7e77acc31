from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src" / "ponto_exato"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from config import get_settings_module

from ponto_exato.database.bootstrap import (
    DEMO_ADMIN_EMAIL,
    DEMO_COMPANY_CODE,
    apply_seed_sql,
    ensure_demo_company,
)

logger = logging.getLogger("seed_db")


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    ensure_demo_company(db_config)

    logger.info(
        "OK: Seeded %s/%s -> company %s (admin %s)",
        db_config.get("host"),
        db_config.get("database"),
        DEMO_COMPANY_CODE,
        DEMO_ADMIN_EMAIL,
    )


if __name__ == "__main__":
    main()
