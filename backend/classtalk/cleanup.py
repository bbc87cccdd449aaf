from __future__ import annotations
import logging
from datetime import datetime, timedelta
from sqlalchemy import delete
from sqlalchemy.orm import Session

from .models import KVEntry

logger = logging.getLogger("classtalk.cleanup")


def purge_stale_entries(db: Session, retention_days: int, *, prefix: str = "session:") -> int:
	"""Delete entries under ``prefix`` not updated for ``retention_days`` days.

	A non-positive retention keeps everything.
	"""
	if retention_days <= 0:
		return 0
	threshold = datetime.utcnow() - timedelta(days=retention_days)
	res = db.execute(
		delete(KVEntry).where(KVEntry.updated_at < threshold).where(KVEntry.key.startswith(prefix))
	)
	db.commit()
	removed = res.rowcount or 0
	if removed:
		logger.info("Purged %d entries older than %d days", removed, retention_days)
	return removed
