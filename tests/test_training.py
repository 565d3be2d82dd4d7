from unittest import mock

import pytest
import requests

from role_user_manager.services.training import LearnDashRestProvider, TrainingService


@pytest.fixture
def provider():
    return LearnDashRestProvider(base_url="https://training.example.com/api/", token="secret", timeout=5)


def _response(json_data=None, ok=True):
    response = mock.Mock(ok=ok)
    response.json.return_value = json_data
    return response


class TestLearnDashRestProvider:
    def test_stats(self, provider, frontline_staff):
        def get(url, headers, timeout):
            if url.endswith("/courses/"):
                return _response([{"id": 1, "completed": True}, {"id": 2, "completed": False}])
            return _response([{"course": 1, "url": "https://training.example.com/c/1"}])

        with mock.patch("role_user_manager.services.training.requests.get", side_effect=get) as get_mock:
            stats = TrainingService.get_stats(frontline_staff, provider)

        assert stats == {
            "courses_enrolled": 2,
            "courses_completed": 1,
            "certificates_earned": 1,
            "completion_rate": 50.0,
        }
        get_mock.assert_any_call(
            f"https://training.example.com/api/users/{frontline_staff.pk}/courses/",
            headers={"Authorization": "Bearer secret"},
            timeout=5,
        )
        # Courses are fetched once per user.
        assert get_mock.call_count == 2

    def test_remove_course_access(self, provider, frontline_staff):
        with mock.patch(
            "role_user_manager.services.training.requests.delete", return_value=_response(ok=True)
        ) as delete_mock:
            assert TrainingService.remove_course_access(frontline_staff, 7, provider)

        delete_mock.assert_called_once_with(
            f"https://training.example.com/api/users/{frontline_staff.pk}/courses/7/",
            headers={"Authorization": "Bearer secret"},
            timeout=5,
        )

    def test_failed_removal(self, provider, frontline_staff):
        with mock.patch(
            "role_user_manager.services.training.requests.delete", return_value=_response(ok=False)
        ):
            assert not TrainingService.remove_course_access(frontline_staff, 7, provider)


class TestTrainingService:
    def test_no_provider_configured(self):
        assert TrainingService.get_provider() is None

    def test_configured_provider(self):
        with mock.patch(
            "role_user_manager.settings.TRAINING_PROVIDER",
            "role_user_manager.services.training.LearnDashRestProvider",
        ):
            assert isinstance(TrainingService.get_provider(), LearnDashRestProvider)

    def test_zeroed_stats_without_provider(self, frontline_staff):
        assert TrainingService.get_stats(frontline_staff) == TrainingService.empty_stats()

    def test_provider_without_removal(self, frontline_staff, training_provider):
        training_provider.remove_course_access = mock.Mock(side_effect=NotImplementedError)

        assert not TrainingService.remove_course_access(frontline_staff, 1, training_provider)

    def test_unreachable_provider_gives_zeroed_stats(self, provider, frontline_staff, caplog):
        with mock.patch(
            "role_user_manager.services.training.requests.get",
            side_effect=requests.ConnectionError("connection refused"),
        ):
            stats = TrainingService.get_stats(frontline_staff, provider)

        assert stats == TrainingService.empty_stats()
        assert "unavailable" in caplog.text

    def test_unreachable_provider_on_removal(self, provider, frontline_staff):
        with mock.patch(
            "role_user_manager.services.training.requests.delete",
            side_effect=requests.ConnectionError("connection refused"),
        ):
            assert not TrainingService.remove_course_access(frontline_staff, 7, provider)
