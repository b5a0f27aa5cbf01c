"""Tests for RecordSanitizer."""

from datetime import datetime, UTC

import pytest

from blog_core.sanitize import RecordSanitizer, clean_text
from blog_core.schemas import Post, User

FIXED_NOW = datetime(2026, 3, 1, 9, 30, 0, tzinfo=UTC)


@pytest.fixture
def sanitizer():
    return RecordSanitizer(clock=lambda: FIXED_NOW)


class TestCleanText:
    """Tests for clean_text."""

    def test_trims_whitespace(self):
        assert clean_text("  alice \n") == "alice"

    def test_escapes_markup(self):
        assert clean_text('<b>"hi" & \'bye\'</b>') == "&lt;b&gt;&#34;hi&#34; &amp; &#39;bye&#39;&lt;/b&gt;"

    def test_clean_input_unchanged(self):
        assert clean_text("Hello World") == "Hello World"

    def test_empty_stays_empty(self):
        assert clean_text("   ") == ""


class TestSanitizeUserFields:
    """Tests for sanitize_user_fields."""

    def test_trims_and_escapes(self, sanitizer):
        user = User(id=42, nickname="  <alice> ", email=" a@x.com ", password=" secret ")
        sanitizer.sanitize_user_fields(user)

        assert user.nickname == "&lt;alice&gt;"
        assert user.email == "a@x.com"

    def test_password_untouched(self, sanitizer):
        user = User(nickname="alice", email="a@x.com", password=" s<e>cret ")
        sanitizer.sanitize_user_fields(user)
        assert user.password == " s<e>cret "

    def test_resets_id_and_stamps_times(self, sanitizer):
        user = User(id=42, nickname="alice", email="a@x.com", password="secret")
        sanitizer.sanitize_user_fields(user)

        assert user.id == 0
        assert user.created_at == FIXED_NOW
        assert user.updated_at == FIXED_NOW

    def test_idempotent_on_clean_input(self, sanitizer):
        user = User(nickname="alice", email="a@x.com", password="secret")
        sanitizer.sanitize_user_fields(user)
        first = user.model_dump()
        sanitizer.sanitize_user_fields(user)
        assert user.model_dump() == first


class TestSanitizePostFields:
    """Tests for sanitize_post_fields."""

    def test_trims_and_escapes(self, sanitizer):
        post = Post(title="  Hi <script> ", content="\tWorld & more\n", author_id=3)
        sanitizer.sanitize_post_fields(post)

        assert post.title == "Hi &lt;script&gt;"
        assert post.content == "World &amp; more"
        assert post.author_id == 3

    def test_clears_embedded_author(self, sanitizer):
        post = Post(
            id=5,
            title="Hi",
            content="World",
            author_id=3,
            author=User(id=3, nickname="mallory", email="m@x.com"),
        )
        sanitizer.sanitize_post_fields(post)

        assert post.author is None
        assert post.id == 0
        assert post.created_at == FIXED_NOW
        assert post.updated_at == FIXED_NOW
