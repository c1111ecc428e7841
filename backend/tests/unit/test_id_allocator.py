"""Unit tests for per-collection id allocation."""

from portfolio.application.services import IdAllocator, id_of, next_id
from portfolio.domain.entities import Collection


def test_id_of_treats_malformed_ids_as_zero():
    assert id_of({"id": 4}) == 4
    assert id_of({}) == 0
    assert id_of({"id": None}) == 0
    assert id_of({"id": "4"}) == 0
    assert id_of({"id": True}) == 0
    assert id_of({"id": -3}) == 0
    assert id_of({"id": 2.5}) == 0


def test_next_id_is_max_plus_one():
    assert next_id([]) == 1
    assert next_id([{"id": 3}, {"id": 9}, {"id": 1}]) == 10
    assert next_id([{"id": "x"}, {"name": "no id"}]) == 1


def test_allocate_advances_counter():
    allocator = IdAllocator()
    allocator.reset(Collection.PROJECTS, [{"id": 4}])

    assert allocator.allocate(Collection.PROJECTS) == 5
    assert allocator.allocate(Collection.PROJECTS) == 6
    assert allocator.peek(Collection.PROJECTS) == 7


def test_collections_are_independent():
    allocator = IdAllocator()
    allocator.reset(Collection.PROJECTS, [{"id": 20}])

    assert allocator.peek(Collection.PROJECTS) == 21
    assert allocator.peek(Collection.DEVELOPERS) == 1


def test_observe_only_moves_upward():
    allocator = IdAllocator()
    allocator.reset(Collection.BLOG_POSTS, [{"id": 5}])

    allocator.observe(Collection.BLOG_POSTS, 2)
    assert allocator.peek(Collection.BLOG_POSTS) == 6

    allocator.observe(Collection.BLOG_POSTS, 10)
    assert allocator.peek(Collection.BLOG_POSTS) == 11


def test_reset_recomputes_from_records():
    allocator = IdAllocator()
    allocator.reset(Collection.MESSAGES, [{"id": 50}])
    allocator.reset(Collection.MESSAGES, [{"id": 3}])

    assert allocator.peek(Collection.MESSAGES) == 4
