from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.srtrack.srtrack.container import build_container
from src.srtrack.srtrack.database.bootstrap import apply_seed_sql
from src.srtrack.srtrack.main import configure_logging, load_settings


def main() -> None:
    settings = load_settings()
    configure_logging(settings)
    config = build_container(settings=settings).conn.config

    seed_path = REPO_ROOT / "database" / "seed.sql"
    apply_seed_sql(config, seed_path=seed_path)

    print(f"OK: Seeded commanders -> {config.user}@{config.host}:{config.port}/{config.database}")


if __name__ == "__main__":
    main()
