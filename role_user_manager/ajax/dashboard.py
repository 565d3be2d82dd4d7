import logging

from role_user_manager.ajax.registry import ajax_action, success_envelope
from role_user_manager.auth import can_export_users, create_nonce
from role_user_manager.presentation import render_user_details, render_user_training
from role_user_manager.services.export import ExportService
from role_user_manager.services.program import ProgramSiteService
from role_user_manager.services.role import RoleService
from role_user_manager.services.training import TrainingService
from role_user_manager.services.user import UserService
from role_user_manager.utils.choices import Capabilities, NonceActions
from role_user_manager.utils.exceptions import ActionError, TrainingProviderUnavailable
from role_user_manager.utils.functions import get_list_param, sanitize_role, sanitize_text, to_int

logger = logging.getLogger(__name__)

BULK_ACTIONS = ["remove", "assign_role"]


def _get_user(data, key="user_id"):
    user_id = to_int(data.get(key))
    if user_id <= 0:
        raise ActionError("Invalid user ID")
    user = UserService.get_user(user_id)
    if user is None:
        raise ActionError("User not found")
    return user


@ajax_action("get_user_details", capability=Capabilities.LIST_USERS, nonce=NonceActions.DASHBOARD)
def get_user_details(actor, data):
    user = _get_user(data)
    user_data = UserService.get_user_details(user, actor, provider=TrainingService.get_provider())

    export_nonce = (
        create_nonce(actor, NonceActions.EXPORT_USER_DESCENDANTS) if user_data["can_export"] else None
    )
    html = render_user_details(user_data, export_nonce=export_nonce)
    return success_envelope({"user_data": user_data, "html": html})


@ajax_action("delete_user", capability=Capabilities.DELETE_USERS, nonce=NonceActions.DASHBOARD)
def delete_user(actor, data):
    user = _get_user(data)
    if not UserService.delete_user(user, actor=actor):
        raise ActionError("Failed to delete user")
    return success_envelope(message="User deleted successfully")


@ajax_action("get_sites_for_program", nonce=NonceActions.DASHBOARD)
def get_sites_for_program(actor, data):
    program = sanitize_text(data.get("program"))
    if not program:
        raise ActionError("Program is required")
    return success_envelope(ProgramSiteService.get_sites_for_program(program, sort=True))


@ajax_action("get_user_ld_data", nonce=NonceActions.DASHBOARD)
def get_user_ld_data(actor, data):
    if to_int(data.get("user_id")) <= 0:
        raise ActionError("No user ID provided")
    user = _get_user(data)

    provider = TrainingService.get_provider()
    stats = TrainingService.get_stats(user, provider) if provider is not None else None
    return success_envelope({"html": render_user_training(user, stats)})


@ajax_action(
    "remove_user_from_course", capability=Capabilities.EDIT_USERS, nonce=NonceActions.DASHBOARD
)
def remove_user_from_course(actor, data):
    user_id = to_int(data.get("user_id"))
    course_id = to_int(data.get("course_id"))
    if user_id <= 0 or course_id <= 0:
        raise ActionError("Missing user or course ID")

    provider = TrainingService.get_provider()
    if provider is None:
        raise TrainingProviderUnavailable()

    user = _get_user(data)
    if not TrainingService.remove_course_access(user, course_id, provider):
        raise ActionError("Failed to remove user from course")
    return success_envelope(message="User removed from course")


@ajax_action("bulk_user_action", capability=Capabilities.EDIT_USERS, nonce=NonceActions.DASHBOARD)
def bulk_user_action(actor, data):
    user_ids = [to_int(user_id) for user_id in get_list_param(data, "users")]
    action = sanitize_text(data.get("bulk_action"))
    role = sanitize_role(data.get("bulk_role"))

    if not user_ids or action not in BULK_ACTIONS:
        raise ActionError("No users or action specified")
    if action == "assign_role" and not RoleService.role_exists(role):
        raise ActionError("Invalid role")

    success, fail = UserService.bulk_action(user_ids, action, role=role, actor=actor)
    if not success:
        raise ActionError("No users updated")
    return success_envelope(message=f"Bulk action completed: {success} success, {fail} failed")


@ajax_action("export_users", capability=can_export_users, nonce=NonceActions.DASHBOARD)
def export_users(actor, data):
    users = UserService.get_dashboard_filtered_users(
        program=sanitize_text(data.get("filter_program")),
        site=sanitize_text(data.get("filter_site")),
    )
    logger.info(f"Dashboard export of {len(users)} users requested by {actor.username}")
    return success_envelope(
        {
            "csv_content": ExportService.dashboard_users_csv(users),
            "filename": ExportService.dashboard_users_filename(),
            "count": len(users),
        }
    )
