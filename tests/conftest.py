from __future__ import annotations

import os
import tempfile
from pathlib import Path

_TMP_ROOT = Path(tempfile.mkdtemp(prefix="portfolio-tests-"))
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_ROOT / 'portfolio.db'}"
os.environ["DATA_DIR"] = str(_TMP_ROOT)
os.environ["UPLOAD_DIR"] = str(_TMP_ROOT / "uploads")

import pytest  # noqa: E402

from portfolio.db.base import Base  # noqa: E402
from portfolio.db.seed import seed_default_owner  # noqa: E402
from portfolio.db.session import SessionLocal, engine  # noqa: E402


@pytest.fixture(autouse=True)
def reset_db() -> None:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as session:
        seed_default_owner(session)
    yield
