import uuid

import pytest

from miniapp.core.database import get_session_factory
from miniapp.core.errors import NotFoundError, ValidationError
from miniapp.core.services import widgets_service
from miniapp.core.services.pages_service import create_page, delete_page
from miniapp.core.services.widgets_service import (
    count_widgets,
    create_widget,
    delete_widget,
    list_widgets,
    max_position,
    update_widget,
    validate_config,
)
from miniapp.models import PageCreateRequest, WidgetCreateRequest, WidgetUpdateRequest


@pytest.fixture
def page(session):
    return create_page(session, PageCreateRequest(name="Home", route="/home", is_home=True))


def _widget(session, page_id, widget_type="text", **kwargs):
    return create_widget(session, page_id, WidgetCreateRequest(type=widget_type, **kwargs))


def test_first_widget_on_empty_page_gets_position_one(session, page):
    assert max_position(session, page.id) == 0

    widget = _widget(session, page.id, "banner")

    assert widget.position == 1
    assert widget.page_id == page.id
    assert widget.config == {}


def test_unset_position_appends_after_max(session, page):
    _widget(session, page.id, position=5)
    _widget(session, page.id, position=2)

    appended = _widget(session, page.id)
    null_position = _widget(session, page.id, position=None)

    assert appended.position == 6
    assert null_position.position == 7


def test_explicit_position_is_written_verbatim(session, page):
    first = _widget(session, page.id, position=4)
    second = _widget(session, page.id, position=4)

    assert first.position == second.position == 4
    assert count_widgets(session, page.id) == 2


def test_negative_position_rejected(session, page):
    with pytest.raises(ValidationError):
        _widget(session, page.id, position=-1)


@pytest.mark.parametrize("bad_type", ["Banner", "banners", "", " banner ", "carousel"])
def test_create_rejects_unknown_type(session, page, bad_type):
    with pytest.raises(ValidationError) as exc:
        _widget(session, page.id, bad_type)
    assert exc.value.message == (
        "Invalid widget type. Must be one of: banner, product_grid, text, image, spacer"
    )
    assert count_widgets(session, page.id) == 0


def test_create_on_missing_page_is_not_found(session):
    with pytest.raises(NotFoundError):
        _widget(session, uuid.uuid4())


def test_page_deleted_before_insert_is_not_found(session, monkeypatch):
    sale = create_page(session, PageCreateRequest(name="Sale", route="/sale"))
    check_page = widgets_service.require_page

    def check_then_delete(db, page_id, **kwargs):
        found = check_page(db, page_id, **kwargs)
        with get_session_factory()() as other:
            delete_page(other, page_id)
        return found

    monkeypatch.setattr(widgets_service, "require_page", check_then_delete)

    with pytest.raises(NotFoundError) as exc:
        _widget(session, sale.id, "banner")

    assert exc.value.details == {"page_id": str(sale.id)}
    assert count_widgets(session, sale.id) == 0


def test_config_is_stored_as_given(session, page):
    config = {"columns": 2, "limit": 10, "filters": {"tags": ["new", "sale"]}}

    widget = _widget(session, page.id, "product_grid", config=config)

    assert widget.config == config
    assert list_widgets(session, page.id).widgets[0].config == config


@pytest.mark.parametrize("config", ["hello", "[1, 2]", "", '{"title": ', 0, False, [None, 1.5]])
def test_scalar_and_string_configs_round_trip_unchanged(session, page, config):
    widget = _widget(session, page.id, config=config)

    assert widget.config == config
    assert type(widget.config) is type(config)
    assert list_widgets(session, page.id).widgets[0].config == config


def test_null_config_means_not_supplied(session, page):
    assert validate_config(None) is None
    assert _widget(session, page.id, config=None).config == {}


@pytest.mark.parametrize("bad_config", [float("nan"), float("inf"), {"ratio": float("-inf")}, {1, 2}, object()])
def test_config_must_be_well_formed_json(bad_config):
    with pytest.raises(ValidationError, match="Invalid JSON format for widget config"):
        validate_config(bad_config)


def test_update_changes_only_supplied_fields(session, page):
    widget = _widget(session, page.id, "text", config={"content": "Hello"})

    updated = update_widget(session, widget.id, WidgetUpdateRequest(type="image"))

    assert updated.type == "image"
    assert updated.position == widget.position
    assert updated.config == {"content": "Hello"}


def test_update_position_and_config(session, page):
    widget = _widget(session, page.id)
    _widget(session, page.id)

    updated = update_widget(
        session, widget.id, WidgetUpdateRequest(position=2, config={"height": 24})
    )

    assert updated.position == 2
    assert updated.config == {"height": 24}
    # No collision resolution: both widgets now sit at position 2.
    assert [w.position for w in list_widgets(session, page.id).widgets] == [2, 2]


def test_update_without_fields_returns_current_state(session, page):
    widget = _widget(session, page.id, "spacer")

    updated = update_widget(session, widget.id, WidgetUpdateRequest())

    assert (updated.id, updated.type, updated.position) == (widget.id, "spacer", widget.position)


@pytest.mark.parametrize(
    "payload",
    [
        WidgetUpdateRequest(type="Banner"),
        WidgetUpdateRequest(type=""),
        WidgetUpdateRequest(position=0),
        WidgetUpdateRequest(config={"height": float("nan")}),
    ],
)
def test_update_rejects_invalid_fields(session, page, payload):
    widget = _widget(session, page.id, "text")

    with pytest.raises(ValidationError):
        update_widget(session, widget.id, payload)

    assert list_widgets(session, page.id).widgets[0].type == "text"


def test_update_unknown_widget_is_not_found(session):
    with pytest.raises(NotFoundError):
        update_widget(session, uuid.uuid4(), WidgetUpdateRequest(type="text"))


def test_delete_leaves_gap_in_positions(session, page):
    widgets = [_widget(session, page.id) for _ in range(3)]

    delete_widget(session, widgets[1].id)

    assert [w.position for w in list_widgets(session, page.id).widgets] == [1, 3]


def test_delete_unknown_widget_is_not_found(session):
    with pytest.raises(NotFoundError):
        delete_widget(session, uuid.uuid4())


def test_list_widgets_type_filter(session, page):
    _widget(session, page.id, "banner")
    _widget(session, page.id, "text")
    _widget(session, page.id, "banner")

    banners = list_widgets(session, page.id, widget_type="banner")

    assert banners.total == 2
    assert {w.type for w in banners.widgets} == {"banner"}
    assert list_widgets(session, page.id, widget_type="").total == 3


def test_list_widgets_rejects_unknown_filter(session, page):
    with pytest.raises(ValidationError):
        list_widgets(session, page.id, widget_type="hero")


def test_list_widgets_missing_page_is_not_found(session):
    with pytest.raises(NotFoundError):
        list_widgets(session, uuid.uuid4())
