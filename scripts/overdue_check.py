"""Run the overdue sweep once.

Schedule daily shortly after the cutoff, e.g. cron ``5 22 * * *`` with
TZ=Asia/Singapore. Safe to re-run: already-flagged sessions are left alone.
Also drops registration wizards that expired.
Exit code 1 when any row failed, so the scheduler can alert.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.srtrack.srtrack.container import build_container
from src.srtrack.srtrack.main import configure_logging, load_settings

logger = logging.getLogger("srtrack.overdue_check")


def main() -> int:
    settings = load_settings()
    configure_logging(settings)
    container = build_container(settings=settings)

    report = container.overdue_sweep.check_and_mark_overdue()
    purged = container.registration_service.purge_expired()
    if purged:
        logger.info("purged %d expired registration wizard(s)", purged)

    print(json.dumps(report.to_dict(), indent=2))
    return 1 if report.errors else 0


if __name__ == "__main__":
    sys.exit(main())
