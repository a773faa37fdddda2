"""Database engine, session factory and the request-scoped session dependency."""
import logging
import os
from typing import Annotated

from dotenv import load_dotenv
from fastapi import Depends
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

load_dotenv()

logger = logging.getLogger("blog_api.database")

URL_DATABASE = os.getenv("DATABASE_URL")

if not URL_DATABASE:
    raise ValueError("DATABASE_URL environment variable not set!")

ECHO = os.getenv("DATABASE_ECHO", "false").lower() in ("1", "true", "yes")

connect_args = {"check_same_thread": False} if URL_DATABASE.startswith("sqlite") else {}

engine = create_engine(URL_DATABASE, echo=ECHO, pool_pre_ping=True, connect_args=connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Dependency function that provides a database session for one request"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


db_dependency = Annotated[Session, Depends(get_db)]
