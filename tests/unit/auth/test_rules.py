"""
Unit tests for authorization rules and sign-up validation.
"""

import pytest

from hiprompt.auth import auth_error_from, can_mutate, can_view, registration_problems, require_identity, visible
from hiprompt.errors import AuthApiError, AuthErrorKind
from hiprompt.models.entities import Prompt
from hiprompt.models.session import Identity, Session

U1 = Identity(id="u1", email="u1@example.com")
U2 = Identity(id="u2", email="u2@example.com")

P1 = Prompt(id="p1", title="Secret", content="body", author_id="u1", is_public=False)
P2 = Prompt(id="p2", title="Open", content="body", author_id="u1", is_public=True)


class TestRules:
    def test_author_sees_and_mutates_private_prompt(self):
        session = Session.authenticated(U1)

        assert can_view(session, P1)
        assert can_mutate(session, P1)

    def test_other_user_neither_sees_nor_mutates(self):
        session = Session.authenticated(U2)

        assert not can_view(session, P1)
        assert not can_mutate(session, P1)
        assert can_view(session, P2)
        assert not can_mutate(session, P2)

    def test_anonymous_sees_public_only(self):
        for session in (Session.anonymous(), Session.unknown()):
            assert not can_view(session, P1)
            assert can_view(session, P2)
            assert not can_mutate(session, P2)

    def test_visible_filters_and_keeps_order(self):
        items = [P2, P1, P2.model_copy(update={"id": "p3"})]

        assert [p.id for p in visible(Session.anonymous(), items)] == ["p2", "p3"]
        assert [p.id for p in visible(Session.authenticated(U1), items)] == ["p2", "p1", "p3"]

    def test_require_identity(self):
        for session in (Session.anonymous(), Session.unknown()):
            error = require_identity(session).error
            assert (error.kind, error.message) == (AuthErrorKind.NOT_AUTHENTICATED, "Please sign in first")

        assert require_identity(Session.authenticated(U1)).value == U1


class TestRegistrationProblems:
    def test_valid_form(self):
        assert registration_problems("a@example.com", "secret", "secret", "Ada") == []

    def test_missing_fields(self):
        assert "All fields are required" in registration_problems("", "secret", "secret", "Ada")
        assert "All fields are required" in registration_problems("a@example.com", "secret", "secret", " ")

    def test_short_password(self):
        assert registration_problems("a@example.com", "abc", "abc") == [
            "Password must be at least 6 characters"
        ]

    def test_mismatched_confirmation(self):
        assert registration_problems("a@example.com", "secret1", "secret2") == ["Passwords do not match"]


class TestAuthErrorMapping:
    @pytest.mark.parametrize(
        "error, kind",
        [
            (AuthApiError("Network error: boom"), AuthErrorKind.NETWORK),
            (AuthApiError("slow down", status=429), AuthErrorKind.RATE_LIMITED),
            (AuthApiError("User already registered", status=422), AuthErrorKind.ALREADY_EXISTS),
            (AuthApiError("x", status=422, code="email_exists"), AuthErrorKind.ALREADY_EXISTS),
            (AuthApiError("Invalid login credentials", status=400, code="invalid_grant"), AuthErrorKind.INVALID_CREDENTIALS),
            (AuthApiError("Database error saving new user", status=500), AuthErrorKind.PROVIDER),
        ],
    )
    def test_kinds(self, error, kind):
        assert auth_error_from(error).kind == kind

    def test_provider_message_is_kept(self):
        error = auth_error_from(AuthApiError("Signups not allowed for this instance", status=422))

        assert error.message == "Signups not allowed for this instance"
