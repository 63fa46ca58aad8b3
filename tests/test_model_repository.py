"""Tests for the model repository adapter, against a real SQLite file."""

import pytest
from pydantic import ValidationError

from folded_db.domain.models import Page
from folded_db.repositories.connections import ConnectionRegistry
from folded_db.repositories.model import ModelRepository
from folded_db.services.bootstrap import EngineBootstrap
from folded_db.services.exceptions import PageOutOfRangeError

from .conftest import Post

POST = {
    "title": "Laravel Queues in Action",
    "excerpt": "A collection of real-world challenges with solutions that run in production.",
}


def _seed(posts: ModelRepository, count: int) -> None:
    posts.insert({"title": f"Post {number}", "excerpt": ""} for number in range(1, count + 1))


def test_constructing_a_repository_boots_the_engine(
    registry: ConnectionRegistry, bootstrap: EngineBootstrap, sqlite_connection: dict
) -> None:
    registry.add(sqlite_connection)

    ModelRepository(Post, bootstrap=bootstrap)

    assert bootstrap.booted
    assert bootstrap.manager.connection_names() == ["default"]


def test_all_returns_inserted_rows(booted_sqlite: EngineBootstrap) -> None:
    posts = ModelRepository(Post, bootstrap=booted_sqlite)

    posts.insert([POST])

    result = [post.model_dump() for post in posts.all()]
    assert result == [{"id": 1, **POST}]


def test_create_find_count_and_delete(booted_sqlite: EngineBootstrap) -> None:
    posts = ModelRepository(Post, bootstrap=booted_sqlite)

    created = posts.create(title="Hello")

    assert created.id is not None
    assert posts.find(created.id).title == "Hello"
    assert posts.count() == 1

    posts.delete(created)

    assert posts.find(created.id) is None
    assert posts.count() == 0


def test_save_updates_an_existing_row(booted_sqlite: EngineBootstrap) -> None:
    posts = ModelRepository(Post, bootstrap=booted_sqlite)
    post = posts.create(title="Draft")

    post.title = "Published"
    posts.save(post)

    assert posts.find(post.id).title == "Published"


def test_truncate_removes_every_row(booted_sqlite: EngineBootstrap) -> None:
    posts = ModelRepository(Post, bootstrap=booted_sqlite)
    _seed(posts, 3)

    posts.truncate()

    assert posts.all() == []


def test_insert_with_no_rows_is_a_no_op(booted_sqlite: EngineBootstrap) -> None:
    posts = ModelRepository(Post, bootstrap=booted_sqlite)

    posts.insert([])

    assert posts.count() == 0


def test_paginate_defaults_to_first_page(booted_sqlite: EngineBootstrap) -> None:
    posts = ModelRepository(Post, bootstrap=booted_sqlite)
    _seed(posts, 5)

    page = posts.paginate(2)

    assert [post.title for post in page.items] == ["Post 1", "Post 2"]
    assert page.total == 5
    assert page.current_page == 1
    assert page.last_page == 3
    assert page.has_more_pages


def test_for_page_selects_the_page_used_by_paginate(booted_sqlite: EngineBootstrap) -> None:
    posts = ModelRepository(Post, bootstrap=booted_sqlite)
    _seed(posts, 5)

    page = posts.for_page(2).paginate(2)

    assert page.current_page == 2
    assert page.offset == 2
    assert [post.title for post in page.items] == ["Post 3", "Post 4"]


def test_explicit_page_argument_wins_over_for_page(booted_sqlite: EngineBootstrap) -> None:
    posts = ModelRepository(Post, bootstrap=booted_sqlite)
    _seed(posts, 5)

    page = posts.for_page(2).paginate(2, page=3)

    assert [post.title for post in page.items] == ["Post 5"]
    assert not page.has_more_pages


@pytest.mark.parametrize("page_number", [0, -1])
def test_for_page_below_one_is_out_of_range(booted_sqlite: EngineBootstrap, page_number: int) -> None:
    posts = ModelRepository(Post, bootstrap=booted_sqlite)

    with pytest.raises(PageOutOfRangeError):
        posts.for_page(page_number)


def test_paginate_rejects_non_positive_page_size(booted_sqlite: EngineBootstrap) -> None:
    posts = ModelRepository(Post, bootstrap=booted_sqlite)

    with pytest.raises(ValueError):
        posts.paginate(0)


def test_empty_table_has_a_single_empty_page(booted_sqlite: EngineBootstrap) -> None:
    posts = ModelRepository(Post, bootstrap=booted_sqlite)

    page = posts.paginate()

    assert page.items == []
    assert page.last_page == 1
    assert not page.has_more_pages


def test_repository_boots_again_after_clear(booted_sqlite: EngineBootstrap) -> None:
    posts = ModelRepository(Post, bootstrap=booted_sqlite)
    posts.insert([POST])

    booted_sqlite.clear()

    assert [post.title for post in posts.all()] == [POST["title"]]
    assert booted_sqlite.booted


@pytest.mark.parametrize("field", ["per_page", "current_page"])
def test_page_rejects_values_below_one(field: str) -> None:
    with pytest.raises(ValidationError):
        Page(**{field: 0})
