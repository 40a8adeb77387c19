from datetime import date, timedelta
from uuid import UUID

import structlog
from celery import shared_task

logger = structlog.get_logger()


def get_sync_session():
    from sqlalchemy import create_engine
    from sqlalchemy.orm import Session

    from current_state.core.config import get_settings

    settings = get_settings()
    sync_url = settings.DATABASE_URL.replace("+asyncpg", "")
    engine = create_engine(sync_url)
    return Session(engine)


@shared_task(name="summaries.rollup_day", bind=True, max_retries=3)
def rollup_user_day(self, user_id: str, day: str):
    from current_state.models.user import User
    from current_state.services.summaries import rollup_day

    session = get_sync_session()
    try:
        user = session.get(User, UUID(user_id))
        if user is None:
            logger.warning("rollup_skip", user_id=user_id, reason="unknown_user")
            return
        rollup_day(session, user, date.fromisoformat(day))
        session.commit()
    except Exception as e:
        session.rollback()
        logger.error("rollup_error", user_id=user_id, day=day, error=str(e))
        raise self.retry(exc=e, countdown=60)
    finally:
        session.close()


@shared_task(name="summaries.rollup_all")
def rollup_all(day: str | None = None):
    """Queue one roll-up per user. Defaults to yesterday in each user's timezone."""
    from sqlalchemy import select

    from current_state.models.user import User
    from current_state.services.streaks import today_in

    session = get_sync_session()
    try:
        users = session.execute(select(User.id, User.timezone)).all()
    finally:
        session.close()

    for user_id, tz in users:
        target = day or (today_in(tz) - timedelta(days=1)).isoformat()
        rollup_user_day.delay(str(user_id), target)

    logger.info("rollup_all_queued", day=day or "yesterday", users=len(users))
    return {"day": day, "users": len(users)}
