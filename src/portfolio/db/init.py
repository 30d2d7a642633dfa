from __future__ import annotations

import logging
from pathlib import Path

from portfolio.config import get_settings
from portfolio.db.base import Base
from portfolio.db.errors import PersistenceError
from portfolio.db.session import SessionLocal, engine
from portfolio.db import models  # noqa: F401
from portfolio.db.seed import seed_default_owner

logger = logging.getLogger(__name__)


def ensure_data_directories() -> None:
    settings = get_settings()
    paths: list[Path] = [
        settings.data_dir,
        settings.upload_dir,
        settings.upload_dir / "resumes",
        settings.upload_dir / "videos",
    ]
    for path in paths:
        path.mkdir(parents=True, exist_ok=True)


def init_database() -> dict[str, object]:
    ensure_data_directories()
    Base.metadata.create_all(bind=engine)

    with SessionLocal() as session:
        try:
            owner = seed_default_owner(session)
        except PersistenceError as exc:
            # the site still serves pages without an owner row
            logger.error("Owner user initialization failed: %s", exc)
            return {"owner_id": None}
    return {"owner_id": owner.id}
