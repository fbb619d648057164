import pytest
from werkzeug.security import generate_password_hash

from src.school_attendance.school_attendance.core.enums import Role
from src.school_attendance.school_attendance.core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from src.school_attendance.school_attendance.users.service import AuthService, UserService
from tests.fakes import InMemoryUsers, make_user


def test_authenticate_success_and_failures():
    users = InMemoryUsers(
        [
            make_user(1, username="teacher", password_hash=generate_password_hash("staff123")),
            make_user(2, username="gone", password_hash=generate_password_hash("staff123"), is_active=False),
            make_user(3, username="broken"),
        ]
    )
    auth = AuthService(users)

    s_user = auth.authenticate(" teacher ", "staff123")
    assert (s_user.user_id, s_user.role) == (1, Role.STAFF)

    for username, password in [("teacher", "nope"), ("gone", "staff123"), ("broken", "CHANGE_ME"), ("ghost", "x")]:
        with pytest.raises(AuthenticationError):
            auth.authenticate(username, password)


def test_create_account_defaults_password_and_cleans_lists():
    users = InMemoryUsers()
    service = UserService(users)

    user_id = service.create_account(
        full_name=" Jane Doe ",
        username="jane",
        subjects=["Math", " "],
        additional_roles=[" homeroom "],
        specific_active_days=["1", 3],
    )

    user = users.get_by_id(user_id)
    assert user.full_name == "Jane Doe"
    assert user.subjects == ("Math",)
    assert user.additional_roles == ("homeroom",)
    assert user.specific_active_days == frozenset({1, 3})
    assert AuthService(users).authenticate("jane", "123456").user_id == user_id


def test_create_account_rejections():
    service = UserService(InMemoryUsers([make_user(1, username="jane")]))

    with pytest.raises(ValidationError):
        service.create_account(full_name="Jane", username="jane")
    with pytest.raises(ValidationError):
        service.create_account(full_name="Boss", username="boss", role=Role.ADMIN)
    with pytest.raises(ValidationError):
        service.create_account(full_name="Short", username="short", password="123")
    with pytest.raises(ValidationError):
        service.create_account(full_name="", username="empty")


def test_update_account_keeps_password_when_blank():
    users = InMemoryUsers([make_user(1, password_hash=generate_password_hash("secret1"))])
    service = UserService(users)

    updated = service.update_account(user_id=1, full_name="Renamed", password="", additional_roles=["scouts"])

    assert updated.full_name == "Renamed"
    assert updated.additional_roles == ("scouts",)
    assert AuthService(users).authenticate("user1", "secret1").user_id == 1


def test_update_account_rejects_taken_username():
    service = UserService(InMemoryUsers([make_user(1), make_user(2)]))
    with pytest.raises(ValidationError):
        service.update_account(user_id=2, username="user1")


def test_admin_accounts_are_protected():
    users = InMemoryUsers([make_user(1, role=Role.ADMIN), make_user(2)])
    service = UserService(users)

    with pytest.raises(ValidationError):
        service.delete_user(current_role=Role.ADMIN, user_id=1)
    with pytest.raises(ValidationError):
        service.set_active(current_role=Role.ADMIN, user_id=1, is_active=False)
    with pytest.raises(AuthorizationError):
        service.delete_user(current_role=Role.STAFF, user_id=2)

    service.set_active(current_role=Role.ADMIN, user_id=2, is_active=False)
    assert users.get_by_id(2).is_active is False
    service.delete_user(current_role=Role.ADMIN, user_id=2)
    assert users.get_by_id(2) is None


def test_import_csv_skips_bad_rows():
    users = InMemoryUsers([make_user(1, username="taken")])
    text = (
        "full_name,username,password,employee_number,subjects,additional_roles\n"
        "Jane Doe,jane,secret1,123,Math;Physics,homeroom;scouts\n"
        "Only Name\n"
        "Dup,taken,secret1,,,\n"
        "Budi,budi\n"
    )

    count = UserService(users).import_csv(text)

    assert count == 2
    jane = users.get_by_username("jane")
    assert jane.subjects == ("Math", "Physics")
    assert jane.additional_roles == ("homeroom", "scouts")
    assert jane.employee_number == "123"
    assert AuthService(users).authenticate("budi", "123456").full_name == "Budi"


def test_csv_template_round_trips_through_import():
    users = InMemoryUsers()
    service = UserService(users)

    template = service.csv_template()

    assert template.splitlines()[0] == "full_name,username,password,employee_number,subjects,additional_roles"
    assert service.import_csv(template) == 1


def test_update_account_cannot_deactivate_admin():
    users = InMemoryUsers([make_user(1, role=Role.ADMIN)])

    with pytest.raises(ValidationError):
        UserService(users).update_account(user_id=1, is_active=False)
    assert users.get_by_id(1).is_active is True


def test_role_labels_are_length_capped():
    users = InMemoryUsers([make_user(1)])
    service = UserService(users)

    with pytest.raises(ValidationError):
        service.create_account(full_name="Jane", username="jane", additional_roles=["x" * 101])
    with pytest.raises(ValidationError):
        service.update_account(user_id=1, additional_roles=["x" * 101])

    assert service.update_account(user_id=1, additional_roles=["x" * 100]).additional_roles == ("x" * 100,)
