"""Initialize the database by creating the user, topic and post tables"""
import logging

from database import Base, engine
import models  # noqa: F401  registers the tables on Base.metadata
from logging_config import setup_logging

logger = logging.getLogger("blog_api.init_db")


def init_db():
    logger.info("Creating tables on the database...")
    Base.metadata.create_all(bind=engine)
    logger.info("Tables created successfully: %s", ", ".join(sorted(Base.metadata.tables)))


if __name__ == "__main__":
    setup_logging()
    init_db()
