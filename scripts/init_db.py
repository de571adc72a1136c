from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.srtrack.srtrack.container import build_container
from src.srtrack.srtrack.database.bootstrap import apply_schema, list_tables
from src.srtrack.srtrack.main import SCHEMA_PATH, configure_logging, load_settings


def main() -> None:
    settings = load_settings()
    configure_logging(settings)
    container = build_container(settings=settings)
    config = container.conn.config

    apply_schema(config, schema_path=SCHEMA_PATH)
    tables = list_tables(config)
    print(f"OK: Applied schema.sql -> {config.user}@{config.host}:{config.port}/{config.database} (tables={len(tables)})")


if __name__ == "__main__":
    main()
