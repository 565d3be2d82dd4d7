from django.conf import settings

from role_user_manager.utils.choices import DefaultRoles

ROLE_USER_MANAGER = getattr(settings, "ROLE_USER_MANAGER", None) or {}

ENVIRONMENT = ROLE_USER_MANAGER.get("ENVIRONMENT", getattr(settings, "APP_ENV", "development"))
PROGRAM_SITE_MAP_OPTION = ROLE_USER_MANAGER.get("PROGRAM_SITE_MAP_OPTION", "dash_program_site_map")
USERS_PER_PAGE = ROLE_USER_MANAGER.get("USERS_PER_PAGE", 20)
NONCE_LIFETIME = ROLE_USER_MANAGER.get("NONCE_LIFETIME", 24 * 60 * 60)

# Roles whose holders may export a team, and roles whose details include their team.
EXPORT_ROLES = ROLE_USER_MANAGER.get(
    "EXPORT_ROLES",
    [DefaultRoles.ADMINISTRATOR, DefaultRoles.PROGRAM_LEADER, DefaultRoles.DATA_VIEWER],
)
TEAM_ROLES = ROLE_USER_MANAGER.get(
    "TEAM_ROLES", [DefaultRoles.PROGRAM_LEADER, DefaultRoles.SITE_SUPERVISOR]
)

TRAINING_PROVIDER = ROLE_USER_MANAGER.get("TRAINING_PROVIDER")
TRAINING_API_URL = ROLE_USER_MANAGER.get("TRAINING_API_URL")
TRAINING_API_TOKEN = ROLE_USER_MANAGER.get("TRAINING_API_TOKEN")
TRAINING_API_TIMEOUT = ROLE_USER_MANAGER.get("TRAINING_API_TIMEOUT", 10)

USER_EVENTS_TOPIC = f"{ENVIRONMENT}_user_management_events"
