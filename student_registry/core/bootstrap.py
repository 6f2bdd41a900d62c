"""Database bootstrap: make sure the students table and its indexes exist.

Run out of band (``student-registry-setup-db`` or ``scripts/setup_db.py``)
before starting the service against a fresh database. Safe to run any
number of times.
"""

import logging
import sys

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from student_registry.models.student import Student

logger = logging.getLogger(__name__)


def ensure_student_indexes(engine: Engine) -> list[str]:
    """Create the students table and each declared index if missing.

    Returns the names of the indexes that now exist.
    """
    table = Student.__table__
    table.create(bind=engine, checkfirst=True)
    logger.info("Table %s ready", table.name)

    names = []
    for index in sorted(table.indexes, key=lambda ix: ix.name):
        index.create(bind=engine, checkfirst=True)
        logger.info("Index %s ready", index.name)
        names.append(index.name)
    return names


def main() -> int:
    """Entry point for the setup-db command."""
    from student_registry.core.database import engine

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        ensure_student_indexes(engine)
    except SQLAlchemyError:
        logger.exception("Error setting up database")
        return 1
    finally:
        engine.dispose()

    logger.info("Database setup completed successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())
