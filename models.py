"""SQLAlchemy models defining User, Topic, Post and UserRole for the blog."""
import enum
from sqlalchemy import Column, Integer, String, Text, ForeignKey, Enum
from sqlalchemy.orm import relationship
from database import Base


class UserRole(str, enum.Enum):
    """Enumeration for user roles in the system."""
    NORMAL = "NORMAL"
    ADMINISTRADOR = "ADMINISTRADOR"


class User(Base):
    """User model representing blog accounts."""
    __tablename__ = "tb_usuarios"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    photo = Column(String(500), nullable=True)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.NORMAL)

    posts = relationship("Post", back_populates="creator", cascade="all, delete-orphan")


class Topic(Base):
    """Topic model representing a category posts can be tagged with."""
    __tablename__ = "tb_temas"

    id = Column(Integer, primary_key=True, index=True)
    description = Column(String(255), nullable=False)

    posts = relationship("Post", back_populates="topic")


class Post(Base):
    """Post model representing blog entries created by users."""
    __tablename__ = "tb_postagens"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    photo = Column(String(500), nullable=True)
    creator_id = Column(Integer, ForeignKey("tb_usuarios.id"), nullable=False)
    topic_id = Column(Integer, ForeignKey("tb_temas.id"), nullable=False)

    creator = relationship("User", back_populates="posts")
    topic = relationship("Topic", back_populates="posts")
