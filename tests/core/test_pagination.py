"""Pagination — tests for page/limit normalisation and the pagination envelope."""

from articlehub.core.pagination import (
    ARTICLES_DEFAULT_LIMIT, ARTICLES_MAX_LIMIT, COMMENTS_MAX_LIMIT, MAX_PAGE,
    PageRequest, build_pagination, resolve_page,
)


def test_defaults_when_missing():
    req = resolve_page(None, None, ARTICLES_DEFAULT_LIMIT, ARTICLES_MAX_LIMIT)
    assert req == PageRequest(page=1, limit=10)
    assert req.offset == 0


def test_limit_clamped_to_max():
    assert resolve_page(1, 500, 10, ARTICLES_MAX_LIMIT).limit == 50
    assert resolve_page(1, 500, 20, COMMENTS_MAX_LIMIT).limit == 100


def test_negative_limit_clamped_to_one():
    assert resolve_page(1, -3, 10, 50).limit == 1


def test_page_below_one_treated_as_one():
    assert resolve_page(0, 10, 10, 50).page == 1
    assert resolve_page(-2, 10, 10, 50).page == 1


def test_offset():
    assert PageRequest(page=3, limit=10).offset == 20


def test_envelope_middle_page():
    assert build_pagination(PageRequest(2, 10), 25) == {
        "page": 2, "limit": 10, "total": 25,
        "totalPages": 3, "hasNext": True, "hasPrev": True,
    }


def test_envelope_empty():
    result = build_pagination(PageRequest(1, 10), 0)
    assert result["totalPages"] == 0
    assert result["hasNext"] is False
    assert result["hasPrev"] is False


def test_envelope_last_page_exact_fit():
    result = build_pagination(PageRequest(2, 10), 20)
    assert result["totalPages"] == 2
    assert result["hasNext"] is False


def test_page_clamped_to_max_page():
    req = resolve_page(2**70, 50, 10, ARTICLES_MAX_LIMIT)
    assert req.page == MAX_PAGE
    assert req.offset < 2**63
