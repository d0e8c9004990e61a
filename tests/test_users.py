import pytest

from db.errors import ConstraintViolation, NotFound
from models.comment import Comment
from models.post import Post
from models.user import User


def test_add_assigns_id_and_round_trips_fields(users):
    created = users.add(User(name="Ann", email="ann@x.com", password_hash="h1"))
    assert created.user_id == 1

    fetched = users.get_by_id(created.user_id)
    assert fetched == User(user_id=1, name="Ann", email="ann@x.com", password_hash="h1")


def test_ids_are_unique_across_users(users):
    ids = {
        users.add(User(name=f"user{i}", email=f"u{i}@x.com", password_hash="h")).user_id
        for i in range(5)
    }
    assert len(ids) == 5


def test_duplicate_email_is_allowed(users):
    users.add(User(name="Ann", email="same@x.com", password_hash="h1"))
    users.add(User(name="Bob", email="same@x.com", password_hash="h2"))
    assert [u.name for u in users.find_by_email("same@x.com")] == ["Ann", "Bob"]


@pytest.mark.parametrize("field", ["name", "email", "password_hash"])
def test_add_rejects_empty_fields(users, field):
    values = {"name": "Ann", "email": "ann@x.com", "password_hash": "h1"}
    values[field] = ""
    with pytest.raises(ConstraintViolation):
        users.add(User(**values))
    assert users.list_all() == []


def test_add_rejects_missing_field(users):
    with pytest.raises(ConstraintViolation):
        users.add(User(name="Ann", email=None, password_hash="h1"))


def test_get_by_id_missing(users):
    with pytest.raises(NotFound) as exc:
        users.get_by_id(42)
    assert exc.value.table == "users"
    assert exc.value.row_id == 42


def test_update_changes_only_given_fields(users, ann):
    updated = users.update(ann.user_id, email="ann@new.com")
    assert updated.email == "ann@new.com"
    assert updated.name == "Ann"
    assert users.get_by_id(ann.user_id).email == "ann@new.com"


def test_update_without_changes_returns_record(users, ann):
    assert users.update(ann.user_id) == ann


def test_update_missing_user(users):
    with pytest.raises(NotFound):
        users.update(7, name="Nobody")


def test_update_rejects_key_and_unknown_columns(users, ann):
    with pytest.raises(ConstraintViolation):
        users.update(ann.user_id, user_id=99)
    with pytest.raises(ConstraintViolation):
        users.update(ann.user_id, nickname="annie")


def test_update_rejects_empty_value(users, ann):
    with pytest.raises(ConstraintViolation):
        users.update(ann.user_id, name="")
    assert users.get_by_id(ann.user_id).name == "Ann"


def test_delete_user_without_posts(users, ann):
    users.delete(ann.user_id)
    with pytest.raises(NotFound):
        users.get_by_id(ann.user_id)


def test_delete_user_with_posts_is_rejected(users, ann_post):
    with pytest.raises(ConstraintViolation):
        users.delete(ann_post.user_id)
    assert users.get_by_id(ann_post.user_id).name == "Ann"


def test_delete_user_with_comments_is_rejected(users, posts, comments, ann_post):
    bob = users.add(User(name="Bob", email="bob@x.com", password_hash="h2"))
    comments.add(Comment(post_id=ann_post.post_id, user_id=bob.user_id, comment_body="hey"))
    with pytest.raises(ConstraintViolation):
        users.delete(bob.user_id)


def test_delete_missing_user(users):
    with pytest.raises(NotFound):
        users.delete(3)


def test_ids_are_not_reused_after_delete(users, ann):
    users.delete(ann.user_id)
    bob = users.add(User(name="Bob", email="bob@x.com", password_hash="h2"))
    assert bob.user_id == ann.user_id + 1


def test_list_all_in_id_order(users):
    for name in ("Ann", "Bob", "Cid"):
        users.add(User(name=name, email=f"{name}@x.com", password_hash="h"))
    assert [u.name for u in users.list_all()] == ["Ann", "Bob", "Cid"]


def test_user_str_hides_password_hash():
    user = User(name="Ann", email="ann@x.com", password_hash="secret", user_id=1)
    assert "secret" not in repr(user)
    assert str(user) == "#1 Ann <ann@x.com>"


def test_deleting_post_then_user_succeeds(users, posts, ann_post):
    posts.delete(ann_post.post_id)
    users.delete(ann_post.user_id)
    assert users.list_all() == []
    assert posts.list_by_user(ann_post.user_id) == []


def test_post_model_default_is_draft():
    assert Post(title="t", post_body="b", user_id=1).published is False


@pytest.mark.parametrize("field", ["name", "email", "password_hash"])
def test_varchar_fields_reject_long_values(users, field):
    values = {"name": "Ann", "email": "ann@x.com", "password_hash": "h1"}
    values[field] = "x" * 256
    with pytest.raises(ConstraintViolation):
        users.add(User(**values))
    assert users.list_all() == []


def test_update_passes_key_as_change(users, ann):
    with pytest.raises(ConstraintViolation, match="user_id"):
        users.update(ann.user_id, user_id=ann.user_id + 1)


def test_find_by_unstorable_email(users, ann):
    assert users.find_by_email("\ud800") == []
    assert users.find_by_email("") == []
