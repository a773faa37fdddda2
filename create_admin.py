"""Seed an ADMINISTRADOR account from the ADMIN_* environment variables"""
import logging
import os

from database import Base, SessionLocal, engine
from auth import register_user_no_duplicate
from logging_config import setup_logging
from models import User, UserRole
from repositories import UserRepository
from schemas import UserCreate

logger = logging.getLogger("blog_api.create_admin")


def create_admin(db) -> User:
    """Create the admin user, or promote the existing account with the same email"""
    data = UserCreate(name=os.getenv("ADMIN_NAME", "Administrador"),
                      email=os.getenv("ADMIN_EMAIL", "admin@blogpessoal.com"),
                      password=os.getenv("ADMIN_PASSWORD", "admin123"))

    repository = UserRepository(db)
    existing = repository.get_by_email(data.email)
    if existing:
        if existing.role != UserRole.ADMINISTRADOR:
            existing = repository.update(existing.id, role=UserRole.ADMINISTRADOR)
            logger.info("User %s promoted to ADMINISTRADOR", existing.email)
        else:
            logger.info("Admin %s already exists", existing.email)
        return existing

    admin = register_user_no_duplicate(db, data, role=UserRole.ADMINISTRADOR)
    logger.info("Admin created successfully: %s", admin.email)
    return admin


if __name__ == "__main__":
    setup_logging()
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        create_admin(session)
    finally:
        session.close()
