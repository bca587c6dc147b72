"""Tests for auth models."""

from datetime import UTC

import pytest
from pydantic import ValidationError

from shared.auth.models import User


class TestUser:
    def test_created_at_defaults_to_utc_now(self):
        user = User(user_id="u1", username="alice", password_hash="simple$x")
        assert user.created_at.tzinfo == UTC

    def test_is_frozen(self):
        user = User(user_id="u1", username="alice", password_hash="simple$x")
        with pytest.raises(ValidationError):
            user.username = "bob"

    def test_rejects_empty_username(self):
        with pytest.raises(ValidationError, match="must not be empty"):
            User(user_id="u1", username="", password_hash="simple$x")

    def test_rejects_empty_password_hash(self):
        with pytest.raises(ValidationError, match="must not be empty"):
            User(user_id="u1", username="alice", password_hash="")

    def test_json_roundtrip(self):
        user = User(user_id="u1", username="alice", password_hash="simple$x")
        assert User.model_validate_json(user.model_dump_json()) == user
