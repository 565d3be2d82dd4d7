from django.test import override_settings

from role_user_manager.checks import check_role_user_manager_settings


def _ids() -> list[str]:
    return [issue.id for issue in check_role_user_manager_settings()]


def test_test_settings_are_valid():
    assert _ids() == []


@override_settings(ROLE_USER_MANAGER=None)
def test_missing_settings():
    assert _ids() == ["role_user_manager.W001"]


@override_settings(ROLE_USER_MANAGER=["USERS_PER_PAGE"])
def test_settings_must_be_a_dict():
    assert _ids() == ["role_user_manager.E002"]


@override_settings(ROLE_USER_MANAGER={"TRAINING_PROVIDER": "role_user_manager.services.training.LearnDashRestProvider"})
def test_training_provider_without_url():
    assert _ids() == ["role_user_manager.W002"]


@override_settings(KAFKA_BROKER="localhost:9092", APP_ENV=None, ROLE_USER_MANAGER={})
def test_kafka_without_environment():
    assert _ids() == ["role_user_manager.W003"]
