import pytest

import models
from exceptions import NotFoundError, ValidationFailureError
from repositories import PostRepository, TopicRepository, UserRepository
from conftest import make_user


def test_create_four_users_returns_four_users(db):
    for name in ("Gustavo", "Mallu", "Catarina", "Pamela"):
        make_user(db, f"{name} Boaz", f"{name.lower()}@email.com")
    assert db.query(models.User).count() == 4


def test_get_user_by_id_and_email(db):
    created = make_user(db, "Neusa Boaz", "neusa@email.com")
    repository = UserRepository(db)

    assert repository.get_by_id(created.id).name == "Neusa Boaz"
    assert repository.get_by_email("neusa@email.com").id == created.id
    assert repository.get_by_email("other@email.com") is None
    with pytest.raises(NotFoundError):
        repository.get_by_id(999)


def test_search_users_by_name_substring(db):
    make_user(db, "Estefania Boaz", "estefania@email.com")
    make_user(db, "Pamela Moura", "pamela@email.com")
    assert [u.email for u in UserRepository(db).search_by_name("Boaz")] == ["estefania@email.com"]


def test_update_user_overwrites_only_given_fields(db):
    created = make_user(db, "Estefania Boaz", "estefania@email.com")
    old_hash = created.password_hash

    updated = UserRepository(db).update(created.id, name="Estefania Moura")

    assert updated.name == "Estefania Moura"
    assert updated.email == "estefania@email.com"
    assert updated.photo == "URLFOTO"
    assert updated.password_hash == old_hash


def test_create_post_with_missing_user_persists_nothing(db):
    topic = TopicRepository(db).create("Go")
    with pytest.raises(ValidationFailureError):
        PostRepository(db).create("Title", "Body", creator_id=42, topic_id=topic.id)
    assert db.query(models.Post).count() == 0


def test_create_post_with_missing_topic_persists_nothing(db):
    user = make_user(db, "Gustavo Boaz", "gustavo@email.com")
    with pytest.raises(ValidationFailureError):
        PostRepository(db).create("Title", "Body", creator_id=user.id, topic_id=42)
    assert db.query(models.Post).count() == 0


def test_update_post_changes_topic_and_keeps_creator(db, blog):
    repository = PostRepository(db)
    post = repository.search(title="Async")[0]

    updated = repository.update(post.id, title="Async Go", topic_id=blog["go"].id)

    assert updated.title == "Async Go"
    assert updated.description == "Event loops"
    assert updated.topic.description == "Go"
    assert updated.creator.email == "bia@email.com"


def test_update_post_with_missing_topic_fails(db, blog):
    repository = PostRepository(db)
    post = repository.list_all()[0]
    with pytest.raises(ValidationFailureError):
        repository.update(post.id, topic_id=999)
    with pytest.raises(NotFoundError):
        repository.update(999, title="Nope")


@pytest.mark.parametrize("repository_class, model", [
    (UserRepository, models.User),
    (TopicRepository, models.Topic),
    (PostRepository, models.Post),
])
def test_delete_missing_id_leaves_store_unchanged(db, blog, repository_class, model):
    before = db.query(model).count()
    with pytest.raises(NotFoundError):
        repository_class(db).delete(999)
    assert db.query(model).count() == before


def test_delete_topic_in_use_is_blocked(db, blog):
    with pytest.raises(ValidationFailureError):
        TopicRepository(db).delete(blog["go"].id)
    assert db.query(models.Topic).count() == 2


def test_delete_unused_topic(db):
    topic = TopicRepository(db).create("Rust")
    TopicRepository(db).delete(topic.id)
    assert db.query(models.Topic).count() == 0


def test_delete_user_removes_their_posts(db, blog):
    UserRepository(db).delete(blog["ana"].id)
    assert db.query(models.User).count() == 1
    assert [p.title for p in PostRepository(db).list_all()] == ["FastAPI with Go clients", "Async Python"]
