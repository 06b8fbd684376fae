"""Default data for a fresh database.

Nothing here runs automatically; ``frcpm init-db --seed`` calls
:func:`seed_defaults` explicitly.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from frcpm.database.models import Milestone, Project, Subteam

logger = logging.getLogger(__name__)

DEFAULT_SUBTEAMS: tuple[tuple[str, str, str], ...] = (
    ("Mechanical", "#FF5733", "CAD, Fabrication, Assembly"),
    ("Electrical", "#33A8FF", "Wiring, Electronics, Control Systems"),
    ("Programming", "#33FF57", "Java, Vision Processing, Autonomous"),
    ("Business", "#FF33A8", "Fundraising, Marketing, Outreach"),
)

BUILD_SEASON_DAYS = 42


def seed_defaults(session: Session, today: date | None = None) -> bool:
    """Insert default subteams and a sample project.

    Only seeds an empty database: if any subteam exists nothing is added.

    Args:
        session: Session inside an open transaction.
        today: Project start date (default: today).

    Returns:
        True if data was inserted.
    """
    existing = session.scalar(select(func.count()).select_from(Subteam))
    if existing:
        logger.info("Database already has %d subteams; skipping default data", existing)
        return False

    start = today or date.today()
    session.add_all(
        Subteam(name=name, color_code=color, specialties=specialties)
        for name, color, specialties in DEFAULT_SUBTEAMS
    )

    project = Project(
        name="FRC Build Season Robot",
        start_date=start,
        goal_end_date=start + timedelta(days=BUILD_SEASON_DAYS),
        hard_deadline=start + timedelta(days=BUILD_SEASON_DAYS + 7),
        description="Design, build and program the competition robot.",
    )
    session.add(project)
    session.flush()

    session.add_all(
        [
            Milestone(name="Design Review", due_date=start + timedelta(days=14), project_id=project.id),
            Milestone(name="Drive Base Complete", due_date=start + timedelta(days=28), project_id=project.id),
            Milestone(name="Robot Complete", due_date=start + timedelta(days=BUILD_SEASON_DAYS), project_id=project.id),
        ]
    )
    logger.info("Inserted default subteams and sample project")
    return True
