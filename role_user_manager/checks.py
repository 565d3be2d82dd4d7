from django.conf import settings
from django.core.checks import Error, Warning, register

from role_user_manager.utils.functions import is_kafka_configured


@register()
def check_role_user_manager_settings(*args, **kwargs):
    issues = []

    auth_user_model = getattr(settings, "AUTH_USER_MODEL", None)
    if auth_user_model != "role_user_manager.User":
        issues.append(
            Error(
                "Wrong AUTH_USER_MODEL.",
                hint="You must set AUTH_USER_MODEL = 'role_user_manager.User' in settings.py.",
                obj=settings,
                id="role_user_manager.E001",
            )
        )

    user_settings = getattr(settings, "ROLE_USER_MANAGER", None)
    if user_settings is None:
        issues.append(
            Warning(
                "Missing ROLE_USER_MANAGER.",
                hint="Declare the role_user_manager settings in the dict ROLE_USER_MANAGER in settings.py, "
                     "the defaults are used otherwise.",
                obj=settings,
                id="role_user_manager.W001",
            )
        )
        return issues

    if not isinstance(user_settings, dict):
        issues.append(
            Error(
                "ROLE_USER_MANAGER must be a dict.",
                obj=settings,
                id="role_user_manager.E002",
            )
        )
        return issues

    if user_settings.get("TRAINING_PROVIDER") and not user_settings.get("TRAINING_API_URL"):
        issues.append(
            Warning(
                "Missing TRAINING_API_URL in ROLE_USER_MANAGER.",
                hint="The bundled training provider needs TRAINING_API_URL to reach the training system.",
                obj=settings,
                id="role_user_manager.W002",
            )
        )

    if is_kafka_configured() and not getattr(settings, "APP_ENV", None) and "ENVIRONMENT" not in user_settings:
        issues.append(
            Warning(
                "Missing APP_ENV.",
                hint="User events are published to <APP_ENV>_user_management_events, "
                     "declare APP_ENV (development/staging/production) in settings.py.",
                obj=settings,
                id="role_user_manager.W003",
            )
        )

    return issues
