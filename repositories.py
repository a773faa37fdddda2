"""Repositories wrapping the ORM queries for users, topics and posts.

Every repository works on the session of the current request; it never opens
or closes sessions itself. Writes commit immediately and roll back on error.
"""
import logging
from typing import List, Optional

from sqlalchemy import and_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, contains_eager, joinedload

import models
from exceptions import DuplicateEmailError, NotFoundError, ValidationFailureError

logger = logging.getLogger("blog_api.repositories")


def _present(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


class BaseRepository:
    """Holds the request-scoped session and the commit/rollback handling"""

    def __init__(self, db: Session):
        self.db = db

    def _commit(self):
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Database error, transaction rolled back")
            raise


class UserRepository(BaseRepository):

    def list_all(self) -> List[models.User]:
        return self.db.query(models.User).order_by(models.User.id).all()

    def get_by_id(self, user_id: int) -> models.User:
        """Retrieve a user by ID, raising NotFoundError if absent"""
        user = self.db.query(models.User).filter(models.User.id == user_id).first()
        if not user:
            raise NotFoundError("User id not found")
        return user

    def search_by_name(self, name: str) -> List[models.User]:
        return (self.db.query(models.User)
                .filter(models.User.name.contains(name, autoescape=True))
                .order_by(models.User.id)
                .all())

    def get_by_email(self, email: str) -> Optional[models.User]:
        """Retrieve a user by email address, or None"""
        return self.db.query(models.User).filter(models.User.email == email).first()

    def create(self,
               name: str,
               email: str,
               password_hash: str,
               photo: Optional[str] = None,
               role: models.UserRole = models.UserRole.NORMAL) -> models.User:
        user = models.User(name=name,
                           email=email,
                           password_hash=password_hash,
                           photo=photo,
                           role=role)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise DuplicateEmailError("This email is already in use")
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Database error while creating user %s", email)
            raise
        self.db.refresh(user)
        logger.info("User %s created with role %s", user.email, user.role.value)
        return user

    def update(self,
               user_id: int,
               name: Optional[str] = None,
               password_hash: Optional[str] = None,
               photo: Optional[str] = None,
               role: Optional[models.UserRole] = None) -> models.User:
        """Overwrite the given fields on the stored user; None leaves a field unchanged"""
        user = self.get_by_id(user_id)
        if name is not None:
            user.name = name
        if password_hash is not None:
            user.password_hash = password_hash
        if photo is not None:
            user.photo = photo
        if role is not None:
            user.role = role
        self._commit()
        self.db.refresh(user)
        logger.info("User %s updated", user.id)
        return user

    def delete(self, user_id: int):
        """Delete a user and, through the cascade, every post they created"""
        user = self.get_by_id(user_id)
        self.db.delete(user)
        self._commit()
        logger.info("User %s deleted", user_id)


class TopicRepository(BaseRepository):

    def list_all(self) -> List[models.Topic]:
        return self.db.query(models.Topic).order_by(models.Topic.id).all()

    def get_by_id(self, topic_id: int) -> models.Topic:
        topic = self.db.query(models.Topic).filter(models.Topic.id == topic_id).first()
        if not topic:
            raise NotFoundError("Topic id not found")
        return topic

    def search_by_description(self, description: str) -> List[models.Topic]:
        return (self.db.query(models.Topic)
                .filter(models.Topic.description.contains(description, autoescape=True))
                .order_by(models.Topic.id)
                .all())

    def create(self, description: str) -> models.Topic:
        topic = models.Topic(description=description)
        self.db.add(topic)
        self._commit()
        self.db.refresh(topic)
        logger.info("Topic %s created", topic.id)
        return topic

    def update(self, topic_id: int, description: Optional[str] = None) -> models.Topic:
        topic = self.get_by_id(topic_id)
        if description is not None:
            topic.description = description
        self._commit()
        self.db.refresh(topic)
        logger.info("Topic %s updated", topic.id)
        return topic

    def delete(self, topic_id: int):
        """Delete a topic; refused while any post still references it"""
        topic = self.get_by_id(topic_id)
        in_use = self.db.query(models.Post.id).filter(models.Post.topic_id == topic_id).first()
        if in_use:
            raise ValidationFailureError("Topic is referenced by existing posts")
        self.db.delete(topic)
        self._commit()
        logger.info("Topic %s deleted", topic_id)


class PostRepository(BaseRepository):

    def _query(self):
        return self.db.query(models.Post).options(joinedload(models.Post.creator),
                                                  joinedload(models.Post.topic))

    def list_all(self) -> List[models.Post]:
        return self._query().order_by(models.Post.id).all()

    def get_by_id(self, post_id: int) -> models.Post:
        post = self._query().filter(models.Post.id == post_id).first()
        if not post:
            raise NotFoundError("Post id not found")
        return post

    def search(self,
               title: Optional[str] = None,
               topic_description: Optional[str] = None,
               creator_email: Optional[str] = None) -> List[models.Post]:
        """Select posts matching every given filter.

        Blank filters are ignored. Title and topic description match as
        substrings, the creator email matches exactly. With no filters every
        post is returned.
        """
        predicates = []
        if _present(title):
            predicates.append(models.Post.title.contains(title, autoescape=True))
        if _present(topic_description):
            predicates.append(models.Topic.description.contains(topic_description, autoescape=True))
        if _present(creator_email):
            predicates.append(models.User.email == creator_email)

        query = (self.db.query(models.Post)
                 .join(models.Post.creator)
                 .join(models.Post.topic)
                 .options(contains_eager(models.Post.creator),
                          contains_eager(models.Post.topic)))
        if predicates:
            query = query.filter(and_(*predicates))
        return query.order_by(models.Post.id).all()

    def create(self,
               title: str,
               description: str,
               creator_id: int,
               topic_id: int,
               photo: Optional[str] = None) -> models.Post:
        """Create a post; creator and topic must exist, otherwise nothing is stored"""
        creator = self.db.query(models.User).filter(models.User.id == creator_id).first()
        if not creator:
            raise ValidationFailureError("User id not found")
        topic = self.db.query(models.Topic).filter(models.Topic.id == topic_id).first()
        if not topic:
            raise ValidationFailureError("Topic id not found")

        post = models.Post(title=title,
                           description=description,
                           photo=photo,
                           creator=creator,
                           topic=topic)
        self.db.add(post)
        self._commit()
        logger.info("Post %s created by user %s", post.id, creator_id)
        return self.get_by_id(post.id)

    def update(self,
               post_id: int,
               title: Optional[str] = None,
               description: Optional[str] = None,
               photo: Optional[str] = None,
               topic_id: Optional[int] = None) -> models.Post:
        post = self.get_by_id(post_id)
        if topic_id is not None:
            topic = self.db.query(models.Topic).filter(models.Topic.id == topic_id).first()
            if not topic:
                raise ValidationFailureError("Topic id not found")
            post.topic = topic
        if title is not None:
            post.title = title
        if description is not None:
            post.description = description
        if photo is not None:
            post.photo = photo
        self._commit()
        logger.info("Post %s updated", post_id)
        return self.get_by_id(post_id)

    def delete(self, post_id: int):
        post = self.get_by_id(post_id)
        self.db.delete(post)
        self._commit()
        logger.info("Post %s deleted", post_id)
