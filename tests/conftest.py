from typing import Any, Optional

import pytest
from rest_framework.test import APIClient

from role_user_manager.auth import create_nonce
from role_user_manager.models import Option, UserMeta, UserRole
from role_user_manager.models.user import User
from role_user_manager.services.training import TrainingProvider
from role_user_manager.settings import PROGRAM_SITE_MAP_OPTION
from role_user_manager.utils.choices import DefaultRoles, MetaKeys


@pytest.fixture(autouse=True)
def enable_db_access_for_all_tests(db):
    """
    This fixture enables database access for all tests.
    """
    pass


class FakeTrainingProvider(TrainingProvider):
    """
    In memory training system: {user_id: {course_id: completed}}.
    """

    def __init__(self, courses: Optional[dict] = None, certificates: Optional[dict] = None):
        self.courses = courses or {}
        self.certificates = certificates or {}
        self.removed = []

    def get_enrolled_courses(self, user) -> list[Any]:
        return list(self.courses.get(user.pk, {}).keys())

    def is_course_completed(self, user, course_id) -> bool:
        return bool(self.courses.get(user.pk, {}).get(course_id))

    def get_certificates(self, user) -> list[Any]:
        return self.certificates.get(user.pk, [])

    def remove_course_access(self, user, course_id) -> bool:
        if course_id not in self.courses.get(user.pk, {}):
            return False
        del self.courses[user.pk][course_id]
        self.removed.append((user.pk, course_id))
        return True


@pytest.fixture
def make_user():
    def _make_user(
        username: str,
        role: Optional[str] = None,
        parent: Optional[User] = None,
        **meta,
    ) -> User:
        user = User.objects.create_user(
            username=username, email=f"{username}@example.com", password="password"
        )
        if role:
            UserRole.objects.create(user=user, role=role)
        if parent is not None:
            meta[MetaKeys.PARENT_USER_ID] = parent.pk
        for key, value in meta.items():
            UserMeta.objects.create(user=user, meta_key=key, meta_value=value)
        return user

    return _make_user


@pytest.fixture
def administrator(make_user) -> User:
    return make_user("administrator", role=DefaultRoles.ADMINISTRATOR)


@pytest.fixture
def program_leader(make_user) -> User:
    return make_user("leader", role=DefaultRoles.PROGRAM_LEADER, program="North", site="Harbour")


@pytest.fixture
def frontline_staff(make_user) -> User:
    return make_user("staff", role=DefaultRoles.FRONTLINE_STAFF)


@pytest.fixture
def data_viewer(make_user) -> User:
    return make_user("viewer", role=DefaultRoles.DATA_VIEWER)


@pytest.fixture
def program_site_map():
    value = {"North": ["Harbour", "Airport"], "South": ["Beach", "Harbour"]}
    Option.objects.create(name=PROGRAM_SITE_MAP_OPTION, value=value)
    return value


@pytest.fixture
def api_client():
    def _api_client(user: Optional[User] = None) -> APIClient:
        client = APIClient()
        if user is not None:
            client.force_authenticate(user=user)
        return client

    return _api_client


@pytest.fixture
def post_action(api_client):
    """
    Post an action to the dispatcher as the given user, with a valid security token for the scope.
    """

    def _post_action(user: Optional[User], action: str, scope: Optional[str] = None, **data):
        if scope is not None and user is not None:
            data.setdefault("nonce", create_nonce(user, scope))
        response = api_client(user).post("/ajax/", {"action": action, **data})
        assert response.status_code == 200
        return response.json()

    return _post_action


@pytest.fixture
def training_provider() -> FakeTrainingProvider:
    return FakeTrainingProvider()
