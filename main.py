"""Main application module."""
import logging
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Depends, status, Response

import auth
import models
from database import engine, db_dependency
from exceptions import (DuplicateEmailError, InvalidCredentialsError, NotFoundError,
                        ValidationFailureError)
from logging_config import setup_logging
from repositories import PostRepository, TopicRepository, UserRepository
from schemas import (LoginRequest, LoginResponse, PostCreate, PostRead, PostUpdate,
                     TopicCreate, TopicRead, TopicUpdate, UserCreate, UserRead, UserUpdate)

setup_logging()
logger = logging.getLogger("blog_api.main")

app = FastAPI(title="Blog Pessoal API")
models.Base.metadata.create_all(bind=engine)

CurrentUser = Depends(auth.get_current_user)
Member = Depends(auth.require_member)
Admin = Depends(auth.require_admin)


def list_or_no_content(items: list):
    """Return the list, or an empty 204 response when there is nothing to show"""
    if not items:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return items


def no_content() -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Users

@app.get("/api/Users", response_model=List[UserRead])
async def get_users(db: db_dependency,
                    name: Optional[str] = None,
                    current_user: models.User = CurrentUser):
    """Retrieve all users, or those whose name contains ``name``"""
    repository = UserRepository(db)
    users = repository.search_by_name(name) if name else repository.list_all()
    return list_or_no_content(users)


@app.get("/api/Users/id/{user_id}", response_model=UserRead)
async def read_user(user_id: int,
                    db: db_dependency,
                    current_user: models.User = Member):
    """Retrieve a user by ID"""
    try:
        return UserRepository(db).get_by_id(user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@app.get("/api/Users/email/{email}", response_model=UserRead)
async def read_user_by_email(email: str,
                             db: db_dependency,
                             current_user: models.User = Member):
    """Retrieve a user by email address"""
    user = UserRepository(db).get_by_email(email)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@app.post("/api/Users/cadastrar", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register_user(user: UserCreate, response: Response, db: db_dependency):
    """Register a new NORMAL user. Open to anonymous callers"""
    try:
        db_user = auth.register_user_no_duplicate(db, user)
    except DuplicateEmailError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message)
    response.headers["Location"] = f"/api/Users/email/{db_user.email}"
    return db_user


@app.post("/api/Users/logar", response_model=LoginResponse)
async def login(credentials: LoginRequest, db: db_dependency):
    """Authenticate a user using email and password"""
    try:
        user, token = auth.login(db, credentials.email, credentials.password)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message)
    return {"user": user, "token": f"Bearer {token}"}


@app.put("/api/Users", response_model=UserRead)
async def update_user(updated_user: UserUpdate,
                      db: db_dependency,
                      current_user: models.User = Member):
    """Update a user. Users can only update themselves; only admin can change roles"""
    auth.check_ownership_or_admin(current_user, updated_user.id)
    if updated_user.role is not None and not auth.is_admin(current_user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin privileges required")

    password_hash = auth.hash_password(updated_user.password) if updated_user.password else None
    try:
        return UserRepository(db).update(updated_user.id,
                                         name=updated_user.name,
                                         password_hash=password_hash,
                                         photo=updated_user.photo,
                                         role=updated_user.role)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


@app.delete("/api/Users/deletar/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: int,
                      db: db_dependency,
                      current_user: models.User = Admin):
    """Delete a user and their posts. Only accessible by admin users"""
    try:
        UserRepository(db).delete(user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    return no_content()


# Topics

@app.get("/api/Temas", response_model=List[TopicRead])
async def get_topics(db: db_dependency, current_user: models.User = CurrentUser):
    """Retrieve all topics"""
    return list_or_no_content(TopicRepository(db).list_all())


@app.get("/api/Temas/id/{topic_id}", response_model=TopicRead)
async def read_topic(topic_id: int,
                     db: db_dependency,
                     current_user: models.User = CurrentUser):
    """Retrieve a topic by ID"""
    try:
        return TopicRepository(db).get_by_id(topic_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@app.get("/api/Temas/pesquisa", response_model=List[TopicRead])
async def search_topics(db: db_dependency,
                        description: str = "",
                        current_user: models.User = CurrentUser):
    """Retrieve topics whose description contains ``description``"""
    return list_or_no_content(TopicRepository(db).search_by_description(description))


@app.post("/api/Temas", response_model=TopicRead, status_code=status.HTTP_201_CREATED)
async def create_topic(topic: TopicCreate,
                       db: db_dependency,
                       current_user: models.User = Admin):
    """Create a new topic. Only accessible by admin users"""
    return TopicRepository(db).create(topic.description)


@app.put("/api/Temas", response_model=TopicRead)
async def update_topic(updated_topic: TopicUpdate,
                       db: db_dependency,
                       current_user: models.User = Admin):
    """Update a topic. Only accessible by admin users"""
    try:
        return TopicRepository(db).update(updated_topic.id, description=updated_topic.description)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


@app.delete("/api/Temas/deletar/{topic_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_topic(topic_id: int,
                       db: db_dependency,
                       current_user: models.User = Admin):
    """Delete a topic that no post references. Only accessible by admin users"""
    try:
        TopicRepository(db).delete(topic_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except ValidationFailureError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    return no_content()


# Posts

@app.get("/api/Postagens", response_model=List[PostRead])
async def get_posts(db: db_dependency, current_user: models.User = CurrentUser):
    """Retrieve all posts with their creator and topic"""
    return list_or_no_content(PostRepository(db).list_all())


@app.get("/api/Postagens/id/{post_id}", response_model=PostRead)
async def read_post(post_id: int,
                    db: db_dependency,
                    current_user: models.User = CurrentUser):
    """Retrieve a single post by its ID"""
    try:
        return PostRepository(db).get_by_id(post_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@app.get("/api/Postagens/pesquisa", response_model=List[PostRead])
async def search_posts(db: db_dependency,
                       title: Optional[str] = None,
                       topic: Optional[str] = None,
                       email: Optional[str] = None,
                       current_user: models.User = CurrentUser):
    """Search posts by title, topic description and creator email; all given filters must match"""
    posts = PostRepository(db).search(title=title, topic_description=topic, creator_email=email)
    return list_or_no_content(posts)


@app.post("/api/Postagens", response_model=PostRead, status_code=status.HTTP_201_CREATED)
async def create_post(post: PostCreate,
                      db: db_dependency,
                      current_user: models.User = CurrentUser):
    """Create a new post for an existing creator and topic"""
    try:
        return PostRepository(db).create(title=post.title,
                                         description=post.description,
                                         creator_id=post.creator_id,
                                         topic_id=post.topic_id,
                                         photo=post.photo)
    except ValidationFailureError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


@app.put("/api/Postagens", response_model=PostRead)
async def update_post(updated_post: PostUpdate,
                      db: db_dependency,
                      current_user: models.User = CurrentUser):
    """Update a post in place"""
    try:
        return PostRepository(db).update(updated_post.id,
                                         title=updated_post.title,
                                         description=updated_post.description,
                                         photo=updated_post.photo,
                                         topic_id=updated_post.topic_id)
    except (NotFoundError, ValidationFailureError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


@app.delete("/api/Postagens/deletar/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(post_id: int,
                      db: db_dependency,
                      current_user: models.User = CurrentUser):
    """Delete a post by ID"""
    try:
        PostRepository(db).delete(post_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    return no_content()
