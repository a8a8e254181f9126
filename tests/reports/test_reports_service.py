from __future__ import annotations

import io
from datetime import timedelta

import pandas as pd
import pytest

from src.attendance_tracker.attendance_tracker.core.exceptions import NotFoundError
from tests.fakes import build_fake_container, seed_enrollment


@pytest.fixture
def ctx():
    c = build_fake_container()
    return c, seed_enrollment(c)


def test_admin_stats_counts(ctx, fixed_now):
    c, ids = ctx
    e1 = c.events_repo.add(pairs=[(ids["course"], ids["section_a"])])
    c.events_repo.add(pairs=[], is_active=False)
    c.attendance_service.check_in(e1.event_id, ids["s1"], now=fixed_now)

    stats = c.report_service.admin_stats()

    assert (stats.total_students, stats.active_events, stats.total_attendance, stats.total_courses) == (2, 1, 1, 1)


def test_student_stats_rate_over_visible_events(ctx, fixed_now):
    c, ids = ctx
    pair = (ids["course"], ids["section_a"])
    attended = c.events_repo.add(name="A", pairs=[pair])
    c.events_repo.add(name="B", pairs=[pair])
    c.events_repo.add(name="C", pairs=[pair])
    c.events_repo.add(name="Other section", pairs=[(ids["course"], ids["section_b"])])
    c.attendance_service.check_in(attended.event_id, ids["s1"], now=fixed_now - timedelta(days=40))

    stats = c.report_service.student_stats(c.students_repo.get_by_id(ids["s1"]), now=fixed_now)

    assert stats.total_checkins == 1
    assert stats.this_month == 0
    assert stats.attendance_rate == 33


def test_student_stats_without_visible_events(ctx, fixed_now):
    c, ids = ctx

    stats = c.report_service.student_stats(c.students_repo.get_by_id(ids["s2"]), now=fixed_now)

    assert (stats.total_checkins, stats.this_month, stats.attendance_rate) == (0, 0, 0)


def test_event_sheet_rows_and_xlsx(ctx, fixed_now):
    c, ids = ctx
    event = c.events_repo.add(pairs=[(ids["course"], ids["section_a"])])
    c.attendance_service.check_in(event.event_id, ids["s1"], now=fixed_now)
    c.attendance_service.check_in(event.event_id, ids["s1"], now=fixed_now + timedelta(hours=1))

    sheet = c.report_service.event_sheet(event.event_id)
    df = pd.read_excel(io.BytesIO(c.report_service.event_sheet_xlsx(event.event_id)), dtype=str)

    assert sheet.rows[0]["student_number"] == "S1"
    assert sheet.rows[0]["status"] == "PRESENT_OUT"
    assert list(df.columns) == ["student_number", "name", "time_in", "time_out", "status"]
    assert df.iloc[0]["time_in"] == "2026-03-02 09:00:00"


def test_event_sheet_for_missing_event(ctx):
    c, _ = ctx

    with pytest.raises(NotFoundError):
        c.report_service.event_sheet(1)
