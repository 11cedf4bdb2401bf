import uuid

import pytest

from miniapp.core.errors import ConflictError, NotFoundError, ValidationError
from miniapp.core.services.pages_service import create_page
from miniapp.core.services.widgets_service import create_widget, list_widgets, reorder_widgets
from miniapp.models import PageCreateRequest, ReorderWidgetsRequest, WidgetCreateRequest


def _page_with_widgets(session, route, positions):
    page = create_page(session, PageCreateRequest(name=route.strip("/"), route=route))
    widgets = [
        create_widget(session, page.id, WidgetCreateRequest(type="text", position=pos))
        for pos in positions
    ]
    return page, [w.id for w in widgets]


def _positions(session, page_id):
    return {w.id: w.position for w in list_widgets(session, page_id).widgets}


def _reorder(session, page_id, ids):
    return reorder_widgets(session, page_id, ReorderWidgetsRequest(widget_ids=ids))


def test_reorder_assigns_dense_positions_in_request_order(session):
    page, (w1, w2, w3) = _page_with_widgets(session, "/home", [1, 2, 3])

    result = _reorder(session, page.id, [w3, w1, w2])

    assert [(w.id, w.position) for w in result.widgets] == [(w3, 1), (w1, 2), (w2, 3)]
    assert result.message == "Widgets reordered successfully"
    assert _positions(session, page.id) == {w3: 1, w1: 2, w2: 3}


def test_reorder_closes_gaps_and_duplicate_positions(session):
    page, (w1, w2, w3) = _page_with_widgets(session, "/home", [10, 10, 42])

    _reorder(session, page.id, [w2, w3, w1])

    assert _positions(session, page.id) == {w2: 1, w3: 2, w1: 3}


def test_reorder_is_idempotent(session):
    page, (w1, w2, w3) = _page_with_widgets(session, "/home", [1, 2, 3])
    order = [w2, w3, w1]

    _reorder(session, page.id, order)
    once = _positions(session, page.id)
    _reorder(session, page.id, order)

    assert _positions(session, page.id) == once


def test_reorder_rejects_empty_list(session):
    page, _ = _page_with_widgets(session, "/home", [1])

    with pytest.raises(ValidationError, match="cannot be empty"):
        _reorder(session, page.id, [])


def test_reorder_rejects_duplicates_even_when_count_matches(session):
    page, (w1, w2, w3) = _page_with_widgets(session, "/home", [1, 2, 3])

    with pytest.raises(ValidationError, match="Duplicate widget ID"):
        _reorder(session, page.id, [w1, w1, w2])

    assert _positions(session, page.id) == {w1: 1, w2: 2, w3: 3}


@pytest.mark.parametrize("size", [2, 4])
def test_reorder_rejects_count_mismatch(session, size):
    page, ids = _page_with_widgets(session, "/home", [1, 2, 3])
    ids = (ids + [uuid.uuid4()])[:size]

    with pytest.raises(ValidationError) as exc:
        _reorder(session, page.id, ids)

    assert "number of widget IDs must match" in exc.value.message
    assert exc.value.details == {"expected": 3, "received": size}


def test_reorder_with_widget_from_other_page_changes_nothing(session):
    page_a, (a1, a2) = _page_with_widgets(session, "/a", [5, 7])
    page_b, (b1,) = _page_with_widgets(session, "/b", [3])

    with pytest.raises(ConflictError) as exc:
        _reorder(session, page_a.id, [a1, b1])

    assert str(b1) in exc.value.message
    assert str(page_a.id) in exc.value.message
    assert _positions(session, page_a.id) == {a1: 5, a2: 7}
    assert _positions(session, page_b.id) == {b1: 3}


def test_reorder_with_unknown_widget_changes_nothing(session):
    page, (w1, w2) = _page_with_widgets(session, "/home", [4, 8])
    ghost = uuid.uuid4()

    with pytest.raises(ConflictError) as exc:
        _reorder(session, page.id, [w1, ghost])

    assert exc.value.details == {"widget_id": str(ghost), "page_id": str(page.id)}
    assert _positions(session, page.id) == {w1: 4, w2: 8}


def test_reorder_missing_page_is_not_found(session):
    with pytest.raises(NotFoundError):
        _reorder(session, uuid.uuid4(), [uuid.uuid4()])


def test_reorder_after_concurrent_create_fails_on_stale_count(session):
    page, (w1, w2) = _page_with_widgets(session, "/home", [1, 2])
    create_widget(session, page.id, WidgetCreateRequest(type="spacer"))

    with pytest.raises(ValidationError):
        _reorder(session, page.id, [w2, w1])
