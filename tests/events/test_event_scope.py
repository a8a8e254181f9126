from __future__ import annotations

from datetime import timedelta

from tests.fakes import build_fake_container, seed_enrollment


def _setup():
    c = build_fake_container()
    ids = seed_enrollment(c)
    s1 = c.students_repo.get_by_id(ids["s1"])
    s2 = c.students_repo.get_by_id(ids["s2"])
    return c, ids, s1, s2


def test_event_visible_only_to_exact_course_and_section():
    c, ids, s1, s2 = _setup()
    event = c.events_repo.add(name="E", pairs=[(ids["course"], ids["section_a"])])

    assert [v.event.event_id for v in c.scope_resolver.events_visible_to(s1)] == [event.event_id]
    assert c.scope_resolver.events_visible_to(s2) == []


def test_same_course_other_section_is_not_enough():
    c, ids, _, s2 = _setup()
    c.events_repo.add(pairs=[(ids["course"], ids["section_a"])])

    assert c.scope_resolver.events_visible_to(s2) == []


def test_same_section_other_course_is_not_enough():
    c, ids, _, _ = _setup()
    other = c.courses_repo.create(name="Business", description=None)
    stray = c.students_repo.create(
        student_number="S3", name="Cy", course_id=other, section_id=ids["section_a"]
    )
    c.events_repo.add(pairs=[(ids["course"], ids["section_a"])])

    assert c.scope_resolver.events_visible_to(c.students_repo.get_by_id(stray)) == []


def test_event_without_associations_is_visible_to_nobody():
    c, _, s1, s2 = _setup()
    c.events_repo.add(pairs=[])

    assert c.scope_resolver.events_visible_to(s1) == []
    assert c.scope_resolver.events_visible_to(s2) == []


def test_any_matching_association_is_enough():
    c, ids, s1, s2 = _setup()
    c.events_repo.add(pairs=[(ids["course"], ids["section_a"]), (ids["course"], ids["section_b"])])

    assert len(c.scope_resolver.events_visible_to(s1)) == 1
    assert len(c.scope_resolver.events_visible_to(s2)) == 1


def test_inactive_events_are_still_visible():
    c, ids, s1, _ = _setup()
    c.events_repo.add(pairs=[(ids["course"], ids["section_a"])], is_active=False)

    assert len(c.scope_resolver.events_visible_to(s1)) == 1


def test_views_carry_the_students_own_attendance(fixed_now):
    c, ids, s1, _ = _setup()
    attended = c.events_repo.add(name="Attended", pairs=[(ids["course"], ids["section_a"])])
    c.events_repo.add(name="Missed", pairs=[(ids["course"], ids["section_a"])])
    c.attendance_service.check_in(attended.event_id, s1.student_id, now=fixed_now)
    c.attendance_service.check_in(attended.event_id, s1.student_id, now=fixed_now + timedelta(hours=1))

    views = {v.event.name: v for v in c.scope_resolver.events_visible_to(s1)}

    assert views["Attended"].attendance.time_out == fixed_now + timedelta(hours=1)
    assert views["Missed"].attendance is None
