from django.apps import AppConfig


class RoleUserManagerConfig(AppConfig):
    name = "role_user_manager"
    default_auto_field = "django.db.models.BigAutoField"

    def ready(self):
        from role_user_manager import checks  # noqa: F401
        from role_user_manager.utils.functions import is_kafka_configured

        # If Kafka is not configured, changes are not published
        if not is_kafka_configured():
            return

        from role_user_manager.services.events import UserEventService

        UserEventService.connect()
