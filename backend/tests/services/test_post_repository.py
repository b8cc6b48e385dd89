"""Post Repository tests — visibility-filtered reads and persist-then-mirror writes.

Tests cover:
    - list_posts pagination (skip, count, overflow) and argument validation
    - Every read path hides posts the caller may not see
    - Grouping by category is visibility-filtered and drops empty groups
    - save/delete update the cache only after the backend commits
    - Identity assignment and slug conflicts on save
    - Ids differing only in case reach the backend under the stored spelling
"""

from dataclasses import replace
from datetime import timedelta

import pytest

from blogcore.core.domain_types import PostId, Slug
from blogcore.core.errors import (
    InvalidArgumentError, PersistenceError, SlugConflictError,
)
from blogcore.core.post import Post
from blogcore.core.visibility import is_visible
from blogcore.services.post_repository import PostRepository
from tests.post_builders import FUTURE, NOW, make_post, utc


def _ids(posts):
    return [p.id for p in posts]


@pytest.fixture
def mixed(repo):
    """Published A/B/C, a draft, and a scheduled post."""
    repo.cache.load([
        make_post("A", utc(2024, 3), categories=("Go",)),
        make_post("B", utc(2024, 2), categories=("go", "Rust")),
        make_post("C", utc(2024, 1)),
        make_post("draft", utc(2024, 4), is_published=False, categories=("Secret",)),
        make_post("future", FUTURE, categories=("Go", "Later")),
    ])
    return repo


# --- initialize -----------------------------------------------------------------

async def test_initialize_loads_backend_posts(backend, repo):
    backend.stored = {"x": make_post("x"), "y": make_post("y", utc(2024, 2))}
    await repo.initialize()
    assert repo.loaded
    assert _ids(repo.cache.all()) == ["y", "x"]


# --- list_posts -----------------------------------------------------------------

def test_list_posts_skip_and_count(mixed):
    assert _ids(mixed.list_posts(2, 1, is_admin=False, now=NOW)) == ["B", "C"]


def test_list_posts_skip_past_end_is_empty(mixed):
    assert mixed.list_posts(2, 5, is_admin=False, now=NOW) == []


def test_list_posts_anonymous_sees_only_published_past(mixed):
    assert _ids(mixed.list_posts(10, is_admin=False, now=NOW)) == ["A", "B", "C"]


def test_list_posts_admin_sees_drafts_not_future(mixed):
    assert _ids(mixed.list_posts(10, is_admin=True, now=NOW)) == [
        "draft", "A", "B", "C",
    ]


def test_list_posts_never_returns_invisible(mixed):
    for admin in (False, True):
        for post in mixed.list_posts(100, is_admin=admin, now=NOW):
            assert is_visible(post, admin, NOW)


@pytest.mark.parametrize("count, skip", [(-1, 0), (1, -1)])
def test_list_posts_rejects_negative_arguments(mixed, count, skip):
    with pytest.raises(InvalidArgumentError):
        mixed.list_posts(count, skip, is_admin=False, now=NOW)


def test_list_posts_zero_count_is_empty(mixed):
    assert mixed.list_posts(0, is_admin=True, now=NOW) == []


def test_scheduled_post_appears_once_its_time_comes(mixed):
    later = FUTURE + timedelta(seconds=1)
    assert "future" in _ids(mixed.list_posts(10, is_admin=False, now=later))


# --- categories -----------------------------------------------------------------

def test_list_by_category_case_insensitive(mixed):
    anon = mixed.list_by_category("GO", is_admin=False, now=NOW)
    assert _ids(anon) == ["A", "B"]
    assert anon == mixed.list_by_category("go", is_admin=False, now=NOW)


def test_list_by_unknown_category_is_empty(mixed):
    assert mixed.list_by_category("cobol", is_admin=True, now=NOW) == []


def test_list_categories_by_caller(mixed):
    assert mixed.list_categories(is_admin=False, now=NOW) == ["go", "rust"]
    assert mixed.list_categories(is_admin=True, now=NOW) == ["go", "rust", "secret"]


def test_grouped_by_category_hides_invisible_posts(mixed):
    anon = mixed.grouped_by_category(is_admin=False, now=NOW)
    assert set(anon) == {"go", "rust"}
    assert _ids(anon["go"]) == ["A", "B"]


def test_grouped_by_category_admin_sees_drafts(mixed):
    admin = mixed.grouped_by_category(is_admin=True, now=NOW)
    assert _ids(admin["secret"]) == ["draft"]
    assert "later" not in admin


def test_grouped_by_category_single_key(mixed):
    grouped = mixed.grouped_by_category("RUST", is_admin=False, now=NOW)
    assert list(grouped) == ["rust"]
    assert mixed.grouped_by_category("secret", is_admin=False, now=NOW) == {}


# --- get_by_slug / get_by_id ----------------------------------------------------

def test_get_by_slug_draft_depends_on_caller(mixed):
    assert mixed.get_by_slug("post-draft", is_admin=True, now=NOW).id == "draft"
    assert mixed.get_by_slug("post-draft", is_admin=False, now=NOW) is None


def test_get_by_slug_is_case_insensitive(mixed):
    assert mixed.get_by_slug("POST-A", is_admin=False, now=NOW).id == "A"


def test_get_by_id_hides_future_even_for_admin(mixed):
    assert mixed.get_by_id("future", is_admin=True, now=NOW) is None
    assert mixed.get_by_id("a", is_admin=False, now=NOW).id == "A"


def test_get_for_update_ignores_visibility(mixed):
    assert mixed.get_for_update("future").id == "future"


# --- save -----------------------------------------------------------------------

async def test_save_assigns_identity_and_caches(repo, backend):
    post = Post(id=PostId(""), slug=Slug(""), title="Hello World", pub_date=NOW)
    stored = await repo.save(post)
    assert stored.id
    assert stored.slug == "hello-world"
    assert backend.stored[stored.id] == stored
    assert repo.cache.by_id(stored.id) == stored


async def test_save_existing_replaces(repo):
    repo.cache.load([make_post("a"), make_post("b")])
    await repo.save(replace(make_post("a"), title="Edited"))
    assert len(repo.cache) == 2
    assert repo.cache.by_id("a").title == "Edited"


async def test_failed_save_leaves_cache_unchanged(repo, backend):
    backend.fail_next = True
    post = make_post("new")
    assert repo.cache.by_id("new") is None
    with pytest.raises(PersistenceError):
        await repo.save(post)
    assert repo.cache.by_id("new") is None
    assert backend.calls == [("persist", "new")]


async def test_failed_update_keeps_previous_version(repo, backend):
    repo.cache.load([make_post("a", title="Original")])
    backend.fail_next = True
    with pytest.raises(PersistenceError):
        await repo.save(replace(make_post("a"), title="Edited"))
    assert repo.cache.by_id("a").title == "Original"


async def test_save_rejects_slug_of_another_post(repo, backend):
    repo.cache.load([make_post("a", slug="taken")])
    with pytest.raises(SlugConflictError):
        await repo.save(make_post("b", slug="TAKEN"))
    assert backend.calls == []


async def test_save_same_post_keeps_its_slug(repo):
    repo.cache.load([make_post("a", slug="mine")])
    stored = await repo.save(make_post("a", slug="mine", title="New title"))
    assert stored.slug == "mine"


async def test_save_with_differently_cased_id_updates_one_record(repo, backend):
    await repo.save(make_post("abc"))
    stored = await repo.save(make_post("ABC", slug="other"))
    assert stored.id == "abc"
    assert list(backend.stored) == ["abc"]
    assert backend.stored["abc"].slug == "other"
    assert len(repo.cache) == 1

    reloaded = PostRepository(backend)
    await reloaded.initialize()
    assert len(reloaded.cache) == 1
    assert reloaded.cache.by_id("abc").slug == "other"


# --- delete ---------------------------------------------------------------------

async def test_delete_removes_from_backend_and_cache(repo, backend):
    post = make_post("a")
    await repo.save(post)
    await repo.delete(post)
    assert "a" not in backend.stored
    assert repo.cache.by_id("a") is None


async def test_delete_with_differently_cased_id_erases_stored_record(repo, backend):
    await repo.save(make_post("abc"))
    await repo.delete(make_post("ABC"))
    assert backend.stored == {}
    assert backend.calls[-1] == ("erase", "abc")
    assert len(repo.cache) == 0

    reloaded = PostRepository(backend)
    await reloaded.initialize()
    assert len(reloaded.cache) == 0


async def test_failed_delete_keeps_post_cached(repo, backend):
    repo.cache.load([make_post("a")])
    backend.fail_next = True
    with pytest.raises(PersistenceError):
        await repo.delete(make_post("a"))
    assert repo.cache.by_id("a") is not None


# --- save_file ------------------------------------------------------------------

async def test_save_file_delegates_to_backend(repo, backend):
    url = await repo.save_file(b"png", "image.png", "-1")
    assert url == "/files/-1image.png"
    assert backend.files["-1image.png"] == b"png"


async def test_save_file_propagates_persistence_error(repo, backend):
    backend.fail_next = True
    with pytest.raises(PersistenceError):
        await repo.save_file(b"png", "image.png")
