"""
Unit tests for prompt models: tag rules, row parsing, insert/patch payloads.
"""

import pytest
from pydantic import ValidationError

from hiprompt.models.entities import (
    MAX_TAGS,
    PendingTags,
    ProfileStats,
    Prompt,
    PromptDraft,
    PromptPatch,
    Visibility,
    normalize_tags,
)


class TestPendingTags:
    def test_duplicate_is_kept_once(self):
        tags = PendingTags()

        assert tags.add("ai") is True
        assert tags.add("ai") is False
        assert tags.as_list() == ["ai"]

    def test_blank_and_whitespace(self):
        tags = PendingTags()

        assert tags.add("   ") is False
        assert tags.add("  writing ") is True
        assert "writing" in tags

    def test_never_more_than_ten(self):
        tags = PendingTags()
        for n in range(15):
            tags.add(f"tag{n}")

        assert len(tags) == MAX_TAGS
        assert tags.is_full
        assert tags.add("one-more") is False
        assert tags.as_list()[-1] == "tag9"

    def test_remove(self):
        tags = PendingTags(["a", "b"])

        assert tags.remove("a") is True
        assert tags.remove("a") is False
        assert list(tags) == ["b"]

    def test_normalize_keeps_first_occurrence_order(self):
        assert normalize_tags(["b", " a", "b", "", "c "]) == ["b", "a", "c"]
        assert normalize_tags(None) == []


class TestPrompt:
    def test_embedded_category_is_flattened(self):
        prompt = Prompt.model_validate(
            {
                "id": "p1",
                "title": "T",
                "content": "C",
                "author_id": "u1",
                "categories": {"name": "Writing"},
                "likes_count": None,
                "views_count": None,
                "tags": None,
                "created_at": "2024-01-01T00:00:00+00:00",
            }
        )

        assert prompt.category_name == "Writing"
        assert prompt.likes_count == 0
        assert prompt.views_count == 0
        assert prompt.tags == []

    def test_embedded_author_is_flattened(self):
        base = {"id": "p1", "title": "T", "content": "C", "author_id": "u1"}

        named = Prompt.model_validate({**base, "profiles": {"full_name": "Ada Lovelace", "username": "ada"}})
        handle_only = Prompt.model_validate({**base, "profiles": {"full_name": None, "username": "ada"}})
        no_profile = Prompt.model_validate({**base, "profiles": None})

        assert named.author_name == "Ada Lovelace"
        assert handle_only.author_name == "ada"
        assert no_profile.author_name is None

    def test_visibility(self):
        prompt = Prompt(id="p1", title="T", content="C", author_id="u1", is_public=False)

        assert prompt.visibility == Visibility.PRIVATE
        assert Visibility.from_flag(True) == Visibility.PUBLIC


class TestPromptDraft:
    def test_missing_fields(self):
        draft = PromptDraft(title="  ", content="")

        assert draft.missing_fields() == ["title", "content"]

    def test_to_row_trims_and_nulls_empty_values(self):
        draft = PromptDraft(
            title="  Title ",
            content=" Body ",
            description="  ",
            category_id="",
            tags=PendingTags(["x", "x", "y"]),
        )

        row = draft.to_row("u1")

        assert row == {
            "title": "Title",
            "description": None,
            "content": "Body",
            "category_id": None,
            "author_id": "u1",
            "is_public": True,
            "tags": ["x", "y"],
        }

    def test_no_tags_are_sent_as_null(self):
        assert PromptDraft(title="T", content="C").to_row("u1")["tags"] is None


class TestPromptPatch:
    def test_author_cannot_be_patched(self):
        with pytest.raises(ValidationError):
            PromptPatch(author_id="someone-else")

    def test_only_set_fields_are_written(self):
        row = PromptPatch(title=" New ").to_row()

        assert row["title"] == "New"
        assert "content" not in row
        assert "updated_at" in row


class TestProfileStats:
    def test_totals(self):
        prompts = [
            Prompt(id="1", title="a", content="a", author_id="u", likes_count=2, views_count=5),
            Prompt(id="2", title="b", content="b", author_id="u", is_public=False, likes_count=1, views_count=1),
        ]

        stats = ProfileStats.from_prompts(prompts)

        assert stats.total_prompts == 2
        assert stats.public_prompts == 1
        assert stats.private_prompts == 1
        assert stats.total_likes == 3
        assert stats.total_views == 6
