"""Tests for prompt sessions, custom prompts and guess tracking."""

import re
from unittest.mock import patch

import pytest
from crowdguess import prompts, sessions
from crowdguess.errors import StoreUnavailable


# ── prompt sessions ───────────────────────────────────────────────────────

class TestPromptSessions:
    def test_session_id_format(self):
        session_id = sessions.generate_prompt_session_id("post1")
        assert re.fullmatch(r"prompt_session:post1:\d+:[a-z0-9]{7}", session_id)

    def test_get_or_create_reuses_active(self, store):
        first = sessions.get_or_create_prompt_session(store, "post1")
        second = sessions.get_or_create_prompt_session(store, "post1")
        assert first == second
        assert sessions.is_prompt_session_active(store, "post1")

    def test_posts_have_separate_sessions(self, store):
        a = sessions.get_or_create_prompt_session(store, "post1")
        b = sessions.get_or_create_prompt_session(store, "post2")
        assert a != b

    def test_meta_written(self, store):
        session_id = sessions.get_or_create_prompt_session(store, "post1")
        meta = sessions.get_session_meta(store, session_id)
        assert meta["status"] == "active"
        assert meta["post_id"] == "post1"

    def test_end_session(self, store):
        session_id = sessions.get_or_create_prompt_session(store, "post1")
        assert sessions.end_prompt_session(store, "post1") == session_id

        assert not sessions.is_prompt_session_active(store, "post1")
        assert sessions.get_last_session(store, "post1") == session_id
        meta = sessions.get_session_meta(store, session_id)
        assert meta["status"] == "ended"
        assert "ended_at" in meta

        assert sessions.get_or_create_prompt_session(store, "post1") != session_id

    def test_end_without_active_session(self, store):
        assert sessions.end_prompt_session(store, "post1") is None
        assert sessions.get_last_session(store, "post1") is None

    def test_active_check_swallows_store_errors(self, store):
        with patch.object(store, "get", side_effect=ConnectionError("down")):
            assert sessions.is_prompt_session_active(store, "post1") is False

    def test_create_propagates_store_errors(self, store):
        with patch.object(store, "get", side_effect=ConnectionError("down")):
            with pytest.raises(StoreUnavailable):
                sessions.get_or_create_prompt_session(store, "post1")


# ── custom prompts ────────────────────────────────────────────────────────

class TestCustomPrompts:
    def test_store_and_get(self, store):
        stored = prompts.store_custom_prompt(
            store, "post1", "A circle on top of a triangle", "ice cream", "creator"
        )
        loaded = prompts.get_custom_prompt(store, "post1")
        assert loaded == stored
        assert loaded.answer == "ice cream"

    def test_missing_prompt(self, store):
        assert prompts.get_custom_prompt(store, "post1") is None

    def test_missing_answer_means_no_prompt(self, store):
        prompts.store_custom_prompt(store, "post1", "desc", "answer", "creator")
        store.delete("post:post1:prompt:answer")
        assert prompts.get_custom_prompt(store, "post1") is None

    def test_missing_meta_defaults(self, store):
        prompts.store_custom_prompt(store, "post1", "desc", "answer", "creator")
        store.delete("post:post1:prompt:meta")
        loaded = prompts.get_custom_prompt(store, "post1")
        assert loaded.created_by == "unknown"
        assert loaded.created_at > 0


# ── guess tracking ────────────────────────────────────────────────────────

class TestGuessTracking:
    def test_claim_and_check(self, store):
        assert not prompts.has_user_guessed(store, "post1", "alice")
        assert prompts.claim_guess(store, "post1", "alice") is True
        assert prompts.has_user_guessed(store, "post1", "alice")
        assert not prompts.has_user_guessed(store, "post2", "alice")

    def test_second_claim_fails(self, store):
        prompts.claim_guess(store, "post1", "alice")
        assert prompts.claim_guess(store, "post1", "alice") is False

    def test_release_claim(self, store):
        prompts.claim_guess(store, "post1", "alice")
        prompts.release_guess_claim(store, "post1", "alice")
        assert not prompts.has_user_guessed(store, "post1", "alice")
        assert prompts.claim_guess(store, "post1", "alice") is True

    def test_claim_failure_raises(self, store):
        with patch.object(store, "set", side_effect=ConnectionError("down")):
            with pytest.raises(StoreUnavailable):
                prompts.claim_guess(store, "post1", "alice")

    def test_check_allows_guess_when_store_fails(self, store):
        prompts.claim_guess(store, "post1", "alice")
        with patch.object(store, "get", side_effect=ConnectionError("down")):
            assert prompts.has_user_guessed(store, "post1", "alice") is False
