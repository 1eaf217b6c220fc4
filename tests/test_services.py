"""
Tests for the service layer.
"""
import pytest

from blog_api.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from blog_api.models import Comment, Post, User
from blog_api.notifications import SignupNotifier
from blog_api.services import build_services
from blog_api.storage import ObjectStorageClient

from .conftest import BrokenStorage


class TestPostService:
    """Tests for PostService."""

    def test_create(self, services, user):
        post = services.posts.create("  Title ", "Tech", user.pk)
        assert post.title == "Title"
        assert post.category == "Tech"
        assert post.author == user
        assert post.is_published is False
        assert list(post.likes.all()) == []

    @pytest.mark.parametrize("title,category", [("", "Tech"), ("Title", ""), (None, None), ("  ", "Tech")])
    def test_create_requires_title_and_category(self, services, user, title, category):
        with pytest.raises(ValidationError):
            services.posts.create(title, category, user.pk)
        assert Post.objects.count() == 0

    def test_get_unknown(self, services, db):
        with pytest.raises(NotFoundError):
            services.posts.get(999)

    def test_update_fields_keeps_thumbnail(self, services, post):
        post.thumbnail = "https://media.example.com/old.png"
        post.save()

        updated = services.posts.update(post.pk, {"title": "New", "subtitle": "Sub"}, post.author_id)
        assert updated.title == "New"
        assert updated.subtitle == "Sub"
        assert updated.category == "Testing"
        assert updated.thumbnail == "https://media.example.com/old.png"

    def test_update_ignores_unknown_fields(self, services, post, other_user):
        updated = services.posts.update(
            post.pk, {"author": other_user.pk, "is_published": True}, post.author_id
        )
        assert updated.author_id == post.author_id
        assert updated.is_published is False

    def test_update_replaces_thumbnail(self, services, post, image):
        updated = services.posts.update(post.pk, {}, post.author_id, thumbnail=image("cover.jpg"))
        assert updated.thumbnail.startswith("https://media.example.com/thumbnails/")
        assert updated.thumbnail.endswith(".jpg")
        assert services.storage.storage.exists(updated.thumbnail_key)

    def test_update_removes_replaced_thumbnail_after_commit(
        self, services, post, image, django_capture_on_commit_callbacks
    ):
        first = services.posts.update(post.pk, {}, post.author_id, thumbnail=image("one.png"))
        old_key = first.thumbnail_key
        with django_capture_on_commit_callbacks(execute=True):
            second = services.posts.update(post.pk, {}, post.author_id, thumbnail=image("two.png"))
        assert second.thumbnail != first.thumbnail
        assert not services.storage.storage.exists(old_key)
        assert services.storage.storage.exists(second.thumbnail_key)

    def test_update_rejects_blank_required_field(self, services, post):
        with pytest.raises(ValidationError):
            services.posts.update(post.pk, {"title": "  "}, post.author_id)

    def test_update_unknown(self, services, db):
        with pytest.raises(NotFoundError):
            services.posts.update(999, {"title": "x"}, 1)

    def test_update_by_non_author(self, services, post, other_user):
        with pytest.raises(AuthorizationError):
            services.posts.update(post.pk, {"title": "Hijack"}, requester_id=other_user.pk)
        assert Post.objects.get(pk=post.pk).title == "Test Post"

    def test_update_without_requester_is_refused(self, services, post):
        with pytest.raises(AuthorizationError):
            services.posts.update(post.pk, {"title": "Hijack"}, None)
        with pytest.raises(AuthorizationError):
            services.posts.toggle_publish(post.pk, None)
        post.refresh_from_db()
        assert post.title == "Test Post"
        assert post.is_published is False

    def test_update_storage_failure(self, post, image):
        broken = build_services(storage=ObjectStorageClient(BrokenStorage()))
        with pytest.raises(StorageError):
            broken.posts.update(post.pk, {"title": "New"}, post.author_id, thumbnail=image())
        assert Post.objects.get(pk=post.pk).title == "Test Post"

    def test_toggle_publish_is_involution(self, services, post):
        assert services.posts.toggle_publish(post.pk, post.author_id) is True
        assert services.posts.toggle_publish(post.pk, post.author_id) is False
        assert Post.objects.get(pk=post.pk).is_published is False

    def test_toggle_publish_unknown(self, services, db):
        with pytest.raises(NotFoundError):
            services.posts.toggle_publish(999, 1)

    def test_toggle_publish_by_non_author(self, services, post, other_user):
        with pytest.raises(AuthorizationError):
            services.posts.toggle_publish(post.pk, requester_id=other_user.pk)

    def test_delete_cascades_comments(self, services, post, comment):
        services.posts.delete(post.pk, post.author_id)
        assert not Post.objects.filter(pk=post.pk).exists()
        assert services.comments.list_by_post(post.pk) == []

    def test_delete_by_non_author_leaves_everything(self, services, post, comment, other_user):
        with pytest.raises(AuthorizationError):
            services.posts.delete(post.pk, other_user.pk)
        assert Post.objects.filter(pk=post.pk).exists()
        assert Comment.objects.filter(pk=comment.pk).exists()

    def test_delete_unknown(self, services, user):
        with pytest.raises(NotFoundError):
            services.posts.delete(999, user.pk)

    def test_delete_removes_thumbnail(self, services, post, image, django_capture_on_commit_callbacks):
        key = services.posts.update(post.pk, {}, post.author_id, thumbnail=image()).thumbnail_key
        with django_capture_on_commit_callbacks(execute=True):
            services.posts.delete(post.pk, post.author_id)
        assert not services.storage.storage.exists(key)

    def test_like_is_idempotent(self, services, post, other_user):
        services.posts.like(post.pk, other_user.pk)
        liked = services.posts.like(post.pk, other_user.pk)
        assert [u.pk for u in liked.likes.all()] == [other_user.pk]

    def test_unlike_removes_only_that_user(self, services, post, user, other_user):
        services.posts.like(post.pk, user.pk)
        services.posts.like(post.pk, other_user.pk)
        result = services.posts.unlike(post.pk, other_user.pk)
        assert [u.pk for u in result.likes.all()] == [user.pk]

    def test_unlike_without_like(self, services, post, other_user):
        result = services.posts.unlike(post.pk, other_user.pk)
        assert list(result.likes.all()) == []

    def test_like_unknown_post(self, services, user):
        with pytest.raises(NotFoundError):
            services.posts.like(999, user.pk)
        with pytest.raises(NotFoundError):
            services.posts.unlike(999, user.pk)

    def test_listings(self, services, user, other_user):
        draft = services.posts.create("Draft", "C", user.pk)
        live = services.posts.create("Live", "C", user.pk)
        services.posts.toggle_publish(live.pk, user.pk)
        theirs = services.posts.create("Theirs", "C", other_user.pk)

        assert [p.pk for p in services.posts.list_all()] == [theirs.pk, live.pk, draft.pk]
        assert [p.pk for p in services.posts.list_published()] == [live.pk]
        assert [p.pk for p in services.posts.list_by_author(user.pk)] == [live.pk, draft.pk]

    def test_listing_includes_comments_newest_first(self, services, post, user, other_user):
        services.comments.create(post.pk, user.pk, "first")
        services.comments.create(post.pk, other_user.pk, "second")
        listed = services.posts.list_all()[0]
        assert [c.content for c in listed.comments.all()] == ["second", "first"]
        assert listed.comments.all()[0].user == other_user

    def test_aggregate_likes(self, services, user, other_user, staff_user):
        first = services.posts.create("One", "C", user.pk)
        second = services.posts.create("Two", "C", user.pk)
        services.posts.create("Three", "C", user.pk)
        services.posts.like(first.pk, other_user.pk)
        services.posts.like(first.pk, staff_user.pk)
        services.posts.like(second.pk, other_user.pk)

        assert services.posts.aggregate_likes_for_author(user.pk) == {
            "total_blogs": 3,
            "total_likes": 3,
        }

    def test_aggregate_likes_no_posts(self, services, user):
        assert services.posts.aggregate_likes_for_author(user.pk) == {
            "total_blogs": 0,
            "total_likes": 0,
        }


class TestUserService:
    """Tests for UserService."""

    def test_register(self, services, db):
        user = services.users.register("Ada", "Lovelace", "Ada@Example.com", "secret1")
        assert user.email == "ada@example.com"
        assert user.password != "secret1"
        assert user.check_password("secret1")

    @pytest.mark.parametrize(
        "first,last,email,password",
        [
            ("", "L", "a@x.com", "secret1"),
            ("A", "", "a@x.com", "secret1"),
            ("A", "L", "", "secret1"),
            ("A", "L", "a@x.com", ""),
            ("A", "L", "not-an-email", "secret1"),
            ("A", "L", "a@x.c", "secret1"),
            ("A", "L", "a@x.com", "12345"),
        ],
    )
    def test_register_validation(self, services, db, first, last, email, password):
        with pytest.raises(ValidationError):
            services.users.register(first, last, email, password)
        assert User.objects.count() == 0

    def test_register_duplicate_email(self, services, db):
        services.users.register("Ada", "Lovelace", "a@x.com", "secret1")
        with pytest.raises(ConflictError):
            services.users.register("Someone", "Else", "A@X.com", "different1")
        assert User.objects.count() == 1

    def test_register_notifies_admin(self, services, db, sent_alerts, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            services.users.register("Ada", "Lovelace", "a@x.com", "secret1")
        assert len(sent_alerts) == 1
        assert "a@x.com" in sent_alerts[0][1]

    def test_register_survives_notification_failure(self, storage, db, django_capture_on_commit_callbacks):
        def fail(subject, message):
            raise ConnectionError("alerting down")

        svc = build_services(storage=storage, notifier=SignupNotifier(send=fail))
        with django_capture_on_commit_callbacks(execute=True):
            user = svc.users.register("Ada", "Lovelace", "a@x.com", "secret1")
        assert User.objects.filter(pk=user.pk).exists()

    def test_login(self, services, user):
        logged_in, token = services.users.login("author@example.com", "secret1")
        assert logged_in == user
        assert services.tokens.verify(token) == str(user.pk)

    def test_login_is_case_insensitive_on_email(self, services, user):
        logged_in, _ = services.users.login("AUTHOR@example.com", "secret1")
        assert logged_in == user

    def test_login_failures_are_indistinguishable(self, services, user):
        with pytest.raises(AuthenticationError) as wrong_password:
            services.users.login("author@example.com", "wrong-password")
        with pytest.raises(AuthenticationError) as unknown_email:
            services.users.login("nobody@example.com", "secret1")
        assert wrong_password.value.message == unknown_email.value.message
        assert wrong_password.value.message == "Incorrect email or password"

    def test_login_missing_fields(self, services, db):
        with pytest.raises(ValidationError):
            services.users.login("", "")

    def test_update_profile_partial(self, services, user):
        user.bio = "Old bio"
        user.save()
        updated = services.users.update_profile(
            user.pk, {"occupation": "Engineer", "bio": "", "github": None}
        )
        assert updated.occupation == "Engineer"
        assert updated.bio == "Old bio"
        assert updated.first_name == "Ada"

    def test_update_profile_without_file_keeps_avatar(self, services, user):
        user.photo_url = "https://media.example.com/avatars/old.png"
        user.save()
        updated = services.users.update_profile(user.pk, {"bio": "Hi"})
        assert updated.photo_url == "https://media.example.com/avatars/old.png"

    def test_update_profile_with_file_replaces_avatar(
        self, services, user, image, django_capture_on_commit_callbacks
    ):
        first = services.users.update_profile(user.pk, {}, avatar=image("a.png"))
        old_url, old_key = first.photo_url, first.photo_key
        with django_capture_on_commit_callbacks(execute=True):
            second = services.users.update_profile(user.pk, {}, avatar=image("b.png"))
        assert second.photo_url.startswith("https://media.example.com/avatars/")
        assert second.photo_url != old_url
        assert not services.storage.storage.exists(old_key)

    def test_update_profile_unknown_user(self, services, db):
        with pytest.raises(NotFoundError):
            services.users.update_profile(999, {"bio": "x"})

    def test_list_all(self, services, user, other_user):
        assert set(services.users.list_all()) == {user, other_user}

    def test_get(self, services, user):
        assert services.users.get(user.pk) == user
        with pytest.raises(NotFoundError):
            services.users.get(999)


class TestCommentService:
    """Tests for CommentService."""

    def test_create_and_list(self, services, post, other_user):
        comment = services.comments.create(post.pk, other_user.pk, "  Hello  ")
        assert comment.content == "Hello"
        assert services.comments.list_by_post(post.pk) == [comment]

    def test_create_on_missing_post(self, services, user):
        with pytest.raises(NotFoundError):
            services.comments.create(999, user.pk, "Hello")

    def test_create_blank(self, services, post, user):
        with pytest.raises(ValidationError):
            services.comments.create(post.pk, user.pk, "   ")

    def test_create_too_long(self, services, post, user, settings):
        settings.BLOG_API = {"COMMENT_MAX_LENGTH": 10}
        with pytest.raises(ValidationError):
            services.comments.create(post.pk, user.pk, "x" * 11)

    def test_delete_by_comment_author(self, services, comment, other_user):
        services.comments.delete(comment.pk, other_user.pk)
        assert not Comment.objects.filter(pk=comment.pk).exists()

    def test_delete_by_post_author(self, services, comment, user):
        services.comments.delete(comment.pk, user.pk)
        assert not Comment.objects.filter(pk=comment.pk).exists()

    def test_delete_by_stranger(self, services, comment, staff_user):
        with pytest.raises(AuthorizationError):
            services.comments.delete(comment.pk, staff_user.pk)
        assert Comment.objects.filter(pk=comment.pk).exists()

    def test_delete_unknown(self, services, user):
        with pytest.raises(NotFoundError):
            services.comments.delete(999, user.pk)

    def test_delete_by_post(self, services, post, comment, user):
        services.comments.create(post.pk, user.pk, "another")
        assert services.comments.delete_by_post(post.pk) == 2
        assert services.comments.list_by_post(post.pk) == []
