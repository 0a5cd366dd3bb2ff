"""
Unit tests for the page view-models.

Tests cover:
1. Discover filters and featured prompt
2. Detail like/delete/copy, view counting and reloading on sign-in/out
3. Create form tags and submit
4. Profile tabs, totals and session following
5. Late results discarded after reload or close
"""

import asyncio

import pytest

from hiprompt.auth import SessionManager
from hiprompt.errors import GatewayError
from hiprompt.models.entities import MAX_TAGS, Visibility
from hiprompt.services import CategoryService, LikeService, ProfileService, PromptService
from hiprompt.views import CreatePromptView, DiscoverView, PromptDetailView, ProfileView


@pytest.fixture
def services(gateway):
    return {
        "prompts": PromptService(gateway),
        "likes": LikeService(gateway, counter_strategy="increment"),
        "categories": CategoryService(gateway),
        "profiles": ProfileService(gateway),
    }


async def signed_in(gateway, email=None, password=None) -> SessionManager:
    manager = SessionManager(gateway)
    await manager.initialize()
    if email:
        await manager.sign_in(email, password)
    return manager


@pytest.mark.asyncio
class TestDiscoverView:
    async def test_load_lists_prompts_categories_and_featured(self, gateway, services):
        sessions = await signed_in(gateway)
        view = DiscoverView(sessions, services["prompts"], services["categories"])

        await view.load()

        assert [p.id for p in view.prompts] == ["p-sql", "p-email"]
        assert [c.name for c in view.categories] == ["Coding", "Writing"]
        assert view.featured.id == "p-sql"
        assert view.loading is False
        assert view.category_name("cat-writing") == "Writing"

    async def test_changing_filters_reloads(self, gateway, services):
        sessions = await signed_in(gateway)
        view = DiscoverView(sessions, services["prompts"], services["categories"])
        await view.load()

        changed = await view.set_filters(category_id="cat-writing", search="")
        unchanged = await view.set_filters(category_id="cat-writing", search="  ")

        assert changed is True
        assert unchanged is False
        assert [p.id for p in view.prompts] == ["p-email"]

    async def test_categories_fetched_ahead_are_not_reloaded(self, gateway, services):
        sessions = await signed_in(gateway)
        view = DiscoverView(sessions, services["prompts"], services["categories"])

        assert await view.load_categories() is True
        view.category_id = view.find_category("CODING").id
        await view.load()

        assert [spec.table for spec in gateway.db.calls] == ["categories", "prompts"]
        assert [p.id for p in view.prompts] == ["p-sql"]
        assert view.category_name(view.category_id) == "Coding"

    async def test_category_fetch_failure_is_reported(self, gateway, services):
        sessions = await signed_in(gateway)
        notices = []
        view = DiscoverView(sessions, services["prompts"], services["categories"], on_notice=notices.append)
        gateway.db.fail("categories", GatewayError("Network error: reset"))

        assert await view.load_categories() is False
        assert [n.message for n in notices] == ["Failed to load categories"]

    async def test_failure_produces_error_notice(self, gateway, services):
        sessions = await signed_in(gateway)
        notices = []
        view = DiscoverView(sessions, services["prompts"], services["categories"], on_notice=notices.append)
        gateway.db.fail("prompts", GatewayError("Network error: reset"))

        await view.load()

        assert [(n.level, n.message) for n in notices] == [("error", "Failed to load prompts")]
        assert view.prompts == []

    async def test_stale_load_is_discarded(self, gateway, services):
        sessions = await signed_in(gateway)
        view = DiscoverView(sessions, services["prompts"], services["categories"])
        await view.load()

        first = asyncio.ensure_future(view.set_filters(search="email"))
        second = asyncio.ensure_future(view.set_filters(search="sql"))
        await asyncio.gather(first, second)

        assert view.search == "sql"
        assert [p.id for p in view.prompts] == ["p-sql"]

    async def test_closed_view_ignores_results(self, gateway, services):
        sessions = await signed_in(gateway)
        view = DiscoverView(sessions, services["prompts"], services["categories"])

        view.close()
        await view.load()

        assert view.prompts == []


@pytest.mark.asyncio
class TestPromptDetailView:
    async def test_load_records_view_and_like_state(self, gateway, services):
        sessions = await signed_in(gateway, "bob@example.com", "secret2")
        view = PromptDetailView(sessions, services["prompts"], services["likes"], "p-email")

        await view.load()
        await view.settle()

        assert view.prompt.title == "Cold email opener"
        assert view.likes_count == 3
        assert view.liked is False
        assert view.can_mutate is False
        assert gateway.db.row("prompts", "p-email")["views_count"] == 11
        assert view.copy_text() == "Write a cold email to {name} about {product}."

    async def test_private_prompt_of_someone_else_is_not_found(self, gateway, services):
        sessions = await signed_in(gateway, "bob@example.com", "secret2")
        view = PromptDetailView(sessions, services["prompts"], services["likes"], "p-ada-private")

        await view.load()

        assert view.prompt is None
        assert view.not_found is True

    async def test_toggle_like(self, gateway, services):
        sessions = await signed_in(gateway, "bob@example.com", "secret2")
        notices = []
        view = PromptDetailView(
            sessions, services["prompts"], services["likes"], "p-email", on_notice=notices.append
        )
        await view.load()

        assert await view.toggle_like() is True
        assert (view.liked, view.likes_count) == (True, 4)
        assert await view.toggle_like() is True
        assert (view.liked, view.likes_count) == (False, 3)
        assert [n.message for n in notices] == ["Liked", "Like removed"]
        await view.settle()

    async def test_like_requires_sign_in(self, gateway, services):
        sessions = await signed_in(gateway)
        notices = []
        view = PromptDetailView(
            sessions, services["prompts"], services["likes"], "p-email", on_notice=notices.append
        )
        await view.load()

        assert await view.toggle_like() is False
        assert notices[-1].message == "Please sign in first"
        await view.settle()

    async def test_author_deletes(self, gateway, services):
        sessions = await signed_in(gateway, "ada@example.com", "secret1")
        view = PromptDetailView(sessions, services["prompts"], services["likes"], "p-email")
        await view.load()
        await view.settle()

        assert view.can_mutate is True
        assert await view.delete() is True
        assert view.deleted is True
        assert gateway.db.row("prompts", "p-email") is None

    async def test_non_author_cannot_delete(self, gateway, services):
        sessions = await signed_in(gateway, "bob@example.com", "secret2")
        view = PromptDetailView(sessions, services["prompts"], services["likes"], "p-email")
        await view.load()
        await view.settle()

        assert await view.delete() is False
        assert gateway.db.row("prompts", "p-email") is not None

    async def test_sign_in_rechecks_like_state(self, gateway, services, bob):
        gateway.db.seed("prompt_likes", {"prompt_id": "p-email", "user_id": bob.id})
        sessions = await signed_in(gateway)
        view = PromptDetailView(sessions, services["prompts"], services["likes"], "p-email")
        view.follow_session()
        await view.load()
        assert view.liked is False

        await sessions.sign_in("bob@example.com", "secret2")
        await view.settle()

        assert view.liked is True
        view.close()

    async def test_sign_out_hides_private_prompt(self, gateway, services):
        sessions = await signed_in(gateway, "ada@example.com", "secret1")
        view = PromptDetailView(sessions, services["prompts"], services["likes"], "p-ada-private")
        view.follow_session()
        await view.load()
        await view.settle()
        assert view.prompt.title == "Private notes"

        await sessions.sign_out()
        await view.settle()

        assert view.prompt is None
        assert view.not_found is True
        assert view.can_mutate is False

        await sessions.sign_in("ada@example.com", "secret1")
        await view.settle()

        assert view.prompt.title == "Private notes"
        assert gateway.db.row("prompts", "p-ada-private")["views_count"] == 1
        view.close()


@pytest.mark.asyncio
class TestCreatePromptView:
    async def test_tags_are_unique_and_capped(self, gateway, services):
        sessions = await signed_in(gateway, "ada@example.com", "secret1")
        notices = []
        view = CreatePromptView(sessions, services["prompts"], services["categories"], on_notice=notices.append)

        view.add_tag("ai")
        view.add_tag("ai")
        for n in range(MAX_TAGS + 2):
            view.add_tag(f"t{n}")

        assert len(view.tags) == MAX_TAGS
        assert view.tags.as_list().count("ai") == 1
        assert notices[-1].message == f"At most {MAX_TAGS} tags"

    async def test_submit_creates_prompt(self, gateway, services, ada):
        sessions = await signed_in(gateway, "ada@example.com", "secret1")
        view = CreatePromptView(sessions, services["prompts"], services["categories"])
        await view.load()
        view.add_tag("poem")

        created = await view.submit(
            "Haiku", "Write a haiku about {topic}", category_id=view.find_category("writing").id, is_public=False
        )

        assert created.author_id == ada.id
        assert created.is_public is False
        assert created.tags == ["poem"]
        assert view.notices[-1].message == "Prompt created"

    async def test_submit_requires_title_and_content(self, gateway, services):
        sessions = await signed_in(gateway, "ada@example.com", "secret1")
        view = CreatePromptView(sessions, services["prompts"], services["categories"])
        before = len(gateway.db.rows("prompts"))

        assert await view.submit("", "body") is None
        assert view.notices[-1].message == "Please fill in the title and content"
        assert len(gateway.db.rows("prompts")) == before


@pytest.mark.asyncio
class TestProfileView:
    async def test_tabs_and_totals(self, gateway, services):
        sessions = await signed_in(gateway, "ada@example.com", "secret1")
        view = ProfileView(sessions, services["prompts"], services["profiles"])

        await view.load()

        assert view.profile.username == "ada"
        assert [p.id for p in view.prompts] == ["p-email"]
        assert view.stats.total_prompts == 2
        assert view.stats.private_prompts == 1
        assert view.stats.total_likes == 3

        assert await view.set_tab(Visibility.PRIVATE) is True
        assert [p.id for p in view.prompts] == ["p-ada-private"]
        view.close()

    async def test_follows_identity_changes(self, gateway, services):
        sessions = await signed_in(gateway, "ada@example.com", "secret1")
        view = ProfileView(sessions, services["prompts"], services["profiles"])
        await view.load()

        await sessions.sign_out()
        await view.settle()
        assert view.all_prompts == []
        assert view.profile is None

        await sessions.sign_in("bob@example.com", "secret2")
        await view.settle()
        assert {p.id for p in view.all_prompts} == {"p-sql", "p-bob-private"}
        assert view.profile is None
        view.close()
