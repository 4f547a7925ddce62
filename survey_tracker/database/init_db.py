"""Create the schema and seed default system settings.

Run with ``python -m survey_tracker.database.init_db``.
"""

from __future__ import annotations

import logging

import survey_tracker.database.db as db_module
from survey_tracker.core.config import get_config
from survey_tracker.core.startup import bootstrap
from survey_tracker.domain.statuses import DEFAULT_STATUS_COLORS
from survey_tracker.models import Base, SystemSetting
from survey_tracker.models.system_setting import STATUS_COLORS_KEY, STUCK_THRESHOLD_KEY

logger = logging.getLogger(__name__)


def seed_default_settings() -> int:
    """Insert missing settings keys; existing values are left untouched."""
    defaults = {
        STUCK_THRESHOLD_KEY: get_config().DEFAULT_STUCK_THRESHOLD_DAYS,
        STATUS_COLORS_KEY: dict(DEFAULT_STATUS_COLORS),
    }
    with db_module.get_db_session() as db:
        existing = {row.setting_key for row in db.query(SystemSetting).all()}
        missing = [key for key in defaults if key not in existing]
        for key in missing:
            db.add(SystemSetting(setting_key=key, setting_value=defaults[key]))
        db.commit()
    return len(missing)


def init_db() -> None:
    bootstrap()
    active_url = db_module.get_active_database_url()
    Base.metadata.create_all(bind=db_module.get_engine())
    seeded = seed_default_settings()
    logger.info(
        "database.tables.created",
        extra={
            "event": "database.tables.created",
            "database_url_scheme": active_url.split("://", 1)[0],
            "seeded_settings": seeded,
        },
    )


if __name__ == "__main__":
    init_db()
