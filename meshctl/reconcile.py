"""
CLI entrypoint for the super-admin reconciliation pass. Run after restoring a
backup or when the API reports more than one super-admin:

  python -m meshctl.reconcile
"""

import logging
import sys

from meshctl.core.database import session_scope
from meshctl.core.errors import MeshError
from meshctl.services.store import RecordStore
from meshctl.services.superadmin import reconcile_superadmins

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Demote every super-admin except the one the singleton record (or latest promotion) names."""
    with session_scope() as db:
        try:
            demoted = reconcile_superadmins(RecordStore(db))
        except MeshError as e:
            logger.error("Reconciliation failed: %s", e.message)
            return 1
    logger.info("Reconciliation completed: demoted=%s", demoted or "none")
    return 0


if __name__ == "__main__":
    sys.exit(main())
