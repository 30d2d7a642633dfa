from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from portfolio.config import get_settings
from portfolio.db.models import User
from portfolio.db.repositories import Repository

logger = logging.getLogger(__name__)


def seed_default_owner(session: Session) -> User:
    settings = get_settings()
    repo = Repository(session)
    user = repo.upsert_user(
        settings.default_owner_id,
        {
            "email": settings.default_owner_email,
            "first_name": settings.default_owner_first_name,
            "last_name": settings.default_owner_last_name,
        },
    )
    logger.info("Owner user %s ready for uploads", user.id)
    return user
