# tests/test_accounts.py

from datetime import date, timedelta

import pytest

from app import admin_service, volunteer_service
from app.assessment_service import save_assessment
from app.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from app.models import Assessment, TodoTask, User, Volunteer
from app.todo_service import create_task, update_task
from app.user_service import (
    find_users_with_pending_tasks,
    find_users_with_upcoming_follow_ups,
    find_users_within_radius,
    get_user,
    haversine_km,
    login_user,
    register_user,
    update_location,
)


def test_register_hashes_the_password(db) -> None:
    user = register_user(db, "  alice  ", "secret123")
    assert user.username == "alice"
    assert user.password != "secret123"
    assert login_user(db, "alice", "secret123").id == user.id


def test_duplicate_username_conflicts(db, user) -> None:
    with pytest.raises(ConflictError, match="Username already exists"):
        register_user(db, "alice", "another-secret")
    assert db.query(User).count() == 1


@pytest.mark.parametrize(
    "username, password",
    [
        (None, "secret123"),
        ("bob", None),
        ("bob", "   "),
        ("  ", "secret123"),
        ("ab", "secret123"),
        ("bob", "12345"),
    ],
)
def test_invalid_credentials_fail_before_anything_is_stored(db, username, password) -> None:
    with pytest.raises(ValidationError):
        register_user(db, username, password)
    assert db.query(User).count() == 0


def test_login_failures(db, user) -> None:
    with pytest.raises(AuthenticationError):
        login_user(db, "alice", "wrong-password")
    with pytest.raises(AuthenticationError):
        login_user(db, "nobody", "secret123")


def test_location_queries(db) -> None:
    berlin = register_user(db, "berlin", "secret123", latitude=52.52, longitude=13.405)
    potsdam = register_user(db, "potsdam", "secret123", latitude=52.39, longitude=13.065)
    register_user(db, "munich", "secret123", latitude=48.137, longitude=11.575)
    register_user(db, "nowhere", "secret123")

    nearby = find_users_within_radius(db, 52.52, 13.405, 50)
    assert sorted(u.username for u in nearby) == [berlin.username, potsdam.username]
    assert 25 < haversine_km(52.52, 13.405, 52.39, 13.065) < 30

    with pytest.raises(ValidationError):
        find_users_within_radius(db, 52.52, 13.405, 0)


def test_update_location(db, user) -> None:
    updated = update_location(db, user.id, 40.7, -74.0)
    assert (updated.latitude, updated.longitude) == (40.7, -74.0)
    assert updated.to_dict()["latitude"] == 40.7

    with pytest.raises(ValidationError):
        update_location(db, user.id, 91, 0)
    with pytest.raises(NotFoundError):
        update_location(db, 9999, 0, 0)


def test_pending_tasks_and_follow_ups(db, user) -> None:
    bob = register_user(db, "bob", "secret123")
    carol = register_user(db, "carol", "secret123")

    create_task(db, user.id, "Walk", "DAILY")
    done = create_task(db, bob.id, "Walk", "DAILY")
    update_task(db, done.id, completed=True)

    today = date(2026, 3, 10)
    save_assessment(db, bob.id, "PHQ-9", score=4, follow_up_date=today + timedelta(days=14))
    save_assessment(db, carol.id, "PHQ-9", score=4, follow_up_date=today - timedelta(days=1))

    assert [u.username for u in find_users_with_pending_tasks(db)] == ["alice"]
    assert [u.username for u in find_users_with_upcoming_follow_ups(db, today=today)] == ["bob"]


def test_deleting_a_user_deletes_their_data(db, user) -> None:
    create_task(db, user.id, "Walk", "DAILY")
    save_assessment(db, user.id, "GAD-7", score=3)

    db.delete(get_user(db, user.id))
    db.commit()

    assert db.query(TodoTask).count() == 0
    assert db.query(Assessment).count() == 0


def register_volunteer(db, username="helper", email="helper@example.com"):
    return volunteer_service.register_volunteer(
        db,
        username=username,
        password="secret123",
        email=email,
        full_name="Helpful Person",
        specialization="Peer support",
        experience=3,
    )


def test_volunteer_needs_approval_to_log_in(db) -> None:
    volunteer = register_volunteer(db)
    assert (volunteer.approved, volunteer.active) == (False, False)

    with pytest.raises(AuthenticationError, match="not approved"):
        volunteer_service.login_volunteer(db, "helper", "secret123")

    volunteer_service.approve_volunteer(db, volunteer.id)
    assert volunteer_service.login_volunteer(db, "helper", "secret123").id == volunteer.id

    with pytest.raises(AuthenticationError):
        volunteer_service.login_volunteer(db, "helper", "wrong-password")


def test_volunteer_rejection_and_listing(db) -> None:
    first = register_volunteer(db)
    second = register_volunteer(db, username="helper2", email="helper2@example.com")

    volunteer_service.approve_volunteer(db, second.id)
    rejected = volunteer_service.reject_volunteer(db, first.id, "Incomplete documents")

    assert rejected.rejection_reason == "Incomplete documents"
    assert [v.id for v in volunteer_service.list_pending(db)] == [first.id]
    assert [v.id for v in volunteer_service.list_approved(db)] == [second.id]

    volunteer_service.approve_volunteer(db, first.id)
    assert volunteer_service.get_volunteer(db, first.id).rejection_reason is None


def test_volunteer_duplicates_and_validation(db) -> None:
    register_volunteer(db)

    with pytest.raises(ConflictError, match="Username already exists"):
        register_volunteer(db, email="other@example.com")
    with pytest.raises(ConflictError, match="Email already exists"):
        register_volunteer(db, username="someone-else")
    with pytest.raises(ValidationError):
        register_volunteer(db, username="bademail", email="not-an-email")
    assert db.query(Volunteer).count() == 1


def test_delete_volunteer(db) -> None:
    volunteer = register_volunteer(db)
    volunteer_service.delete_volunteer(db, volunteer.id)
    with pytest.raises(NotFoundError):
        volunteer_service.get_volunteer(db, volunteer.id)


def test_admin_accounts(db) -> None:
    admin = admin_service.create_admin(db, "root", "secret123", full_name="Site Admin")
    assert admin_service.login_admin(db, "root", "secret123").id == admin.id

    with pytest.raises(ConflictError):
        admin_service.create_admin(db, "root", "secret123")
    with pytest.raises(AuthenticationError):
        admin_service.login_admin(db, "root", "nope")
