from __future__ import annotations
from datetime import datetime, timedelta
from sqlalchemy import delete, or_
from sqlalchemy.orm import Session

from .models import AuthSession, RecoveryCode

SESSION_IDLE_DAYS = 7


def purge_stale_auth_data(db: Session, now: datetime | None = None) -> int:
	now = now or datetime.utcnow()
	removed = 0

	# Recovery codes are single use; once used or expired they only take space
	res = db.execute(delete(RecoveryCode).where(or_(RecoveryCode.used.is_(True), RecoveryCode.expires_at < now)))
	removed += res.rowcount or 0

	# Sessions nobody has touched for a week are treated as logged out
	threshold = now - timedelta(days=SESSION_IDLE_DAYS)
	res = db.execute(delete(AuthSession).where(AuthSession.last_activity_at < threshold))
	removed += res.rowcount or 0

	db.commit()
	return removed
