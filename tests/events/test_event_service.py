from __future__ import annotations

import pytest

from src.attendance_tracker.attendance_tracker.core.exceptions import NotFoundError, ValidationError
from tests.fakes import build_fake_container, seed_enrollment


@pytest.fixture
def ctx():
    c = build_fake_container()
    return c, seed_enrollment(c)


def _payload(ids, **overrides):
    data = {
        "name": "Orientation",
        "event_date": "2026-03-02",
        "event_time": "09:30",
        "course_sections": [{"course_id": ids["course"], "section_id": ids["section_a"]}],
    }
    data.update(overrides)
    return data


def test_create_event_issues_qr_and_associations(ctx):
    c, ids = ctx

    created = c.event_service.create_event(_payload(ids))

    assert created.event.qr_code_data
    assert created.event.qr_code.startswith("data:image/png;base64,")
    assert created.event.is_active is True
    assert created.event.event_time.strftime("%H:%M") == "09:30"
    assert [(a.association.course_id, a.association.section_id) for a in created.associations] == [
        (ids["course"], ids["section_a"])
    ]
    assert c.qr_service.decode_payload(created.event.qr_code_data).event_id == created.event.event_id


def test_create_event_rejects_section_from_other_course(ctx):
    c, ids = ctx
    other = c.courses_repo.create(name="Business", description=None)

    with pytest.raises(ValidationError):
        c.event_service.create_event(
            _payload(ids, course_sections=[{"course_id": other, "section_id": ids["section_a"]}])
        )
    assert c.events_repo.rows == {}


@pytest.mark.parametrize(
    "field,value",
    [("name", ""), ("event_date", "03/02/2026"), ("event_time", "9.30"), ("course_sections", "oops")],
)
def test_create_event_validation(ctx, field, value):
    c, ids = ctx

    with pytest.raises(ValidationError):
        c.event_service.create_event(_payload(ids, **{field: value}))


def test_create_event_dedupes_pairs(ctx):
    c, ids = ctx
    pair = {"course_id": ids["course"], "section_id": ids["section_b"]}

    created = c.event_service.create_event(_payload(ids, course_sections=[pair, pair]))

    assert len(created.associations) == 1


def test_update_replaces_associations(ctx):
    c, ids = ctx
    created = c.event_service.create_event(_payload(ids))

    updated = c.event_service.update_event(
        created.event.event_id,
        {"name": "Renamed", "course_sections": [{"course_id": ids["course"], "section_id": ids["section_b"]}]},
    )

    assert updated.event.name == "Renamed"
    assert [a.association.section_id for a in updated.associations] == [ids["section_b"]]


def test_update_without_course_sections_keeps_them(ctx):
    c, ids = ctx
    created = c.event_service.create_event(_payload(ids))

    updated = c.event_service.update_event(created.event.event_id, {"is_active": "false"})

    assert updated.event.is_active is False
    assert len(updated.associations) == 1


def test_update_missing_event(ctx):
    c, _ = ctx

    with pytest.raises(NotFoundError):
        c.event_service.update_event(99, {"name": "x"})


def test_regenerate_qr_changes_payload(ctx, fixed_now):
    c, ids = ctx
    created = c.event_service.create_event(_payload(ids))

    regenerated = c.event_service.regenerate_qr(created.event.event_id, now=fixed_now)
    payload = c.qr_service.decode_payload(regenerated.event.qr_code_data)

    assert payload.event_id == created.event.event_id
    assert payload.issued_at == int(fixed_now.timestamp() * 1000)
    assert regenerated.event.qr_code != created.event.qr_code


def test_qr_png_for_missing_event(ctx):
    c, _ = ctx

    with pytest.raises(NotFoundError):
        c.event_service.qr_png(5)


def test_delete_event_removes_associations(ctx):
    c, ids = ctx
    created = c.event_service.create_event(_payload(ids))

    c.event_service.delete_event(created.event.event_id)

    assert c.events_repo.get_by_id(created.event.event_id) is None
    assert c.events_repo.associations.get(created.event.event_id) is None
    with pytest.raises(NotFoundError):
        c.event_service.delete_event(created.event.event_id)
