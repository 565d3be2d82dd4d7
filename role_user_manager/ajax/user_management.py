import logging

from role_user_manager.ajax.registry import ajax_action, success_envelope
from role_user_manager.presentation import field_display_value
from role_user_manager.services.fields import SitesField, get_editable_field
from role_user_manager.services.program import ProgramSiteService
from role_user_manager.services.user import UserService
from role_user_manager.typing import UserFilters
from role_user_manager.utils.choices import Capabilities, MetaKeys, NonceActions
from role_user_manager.utils.exceptions import ActionError
from role_user_manager.utils.functions import get_list_param, sanitize_text, to_int

logger = logging.getLogger(__name__)


def user_management_action(name: str):
    return ajax_action(name, capability=Capabilities.EDIT_USERS, nonce=NonceActions.USER_MANAGEMENT)


def get_filters(data) -> UserFilters:
    return {
        "role": sanitize_text(data.get("filter_role")),
        "program": sanitize_text(data.get("filter_program")),
        "site": sanitize_text(data.get("filter_site")),
    }


@user_management_action("get_filtered_users")
def get_filtered_users(actor, data):
    users = UserService.get_filtered_users(get_filters(data))
    return success_envelope(
        {
            "users": [
                {
                    "ID": user.pk,
                    "display_name": user.display_name,
                    "user_email": user.email,
                    "role": user.primary_role,
                    "programme": UserService.get_meta(user, MetaKeys.PROGRAMME, ""),
                    "sites": UserService.get_sites(user),
                    "parent_user_id": UserService.get_parent_id(user),
                }
                for user in users
            ],
            "total": len(users),
        }
    )


@user_management_action("update_user_data")
def update_user_data(actor, data):
    try:
        user_id = to_int(data.get("user_id"))
        field_name = sanitize_text(data.get("field"))
        if user_id <= 0 or not field_name:
            raise ActionError("Invalid parameters")

        user = UserService.get_user(user_id)
        if user is None:
            raise ActionError("User not found")

        field = get_editable_field(field_name)
        value = get_list_param(data, "value") if field is SitesField else data.get("value", "")
        message = field.update(user, value, actor=actor)

        return success_envelope(
            {"message": message, "display_value": field_display_value(user, field.name)}, message
        )
    except ActionError:
        raise
    except Exception as e:
        logger.exception(f"Updating user data failed: {str(e)}")
        raise ActionError(f"An error occurred: {str(e)}")


@user_management_action("get_users_for_parent")
def get_users_for_parent(actor, data):
    exclude = UserService.get_user(data.get("exclude")) if data.get("exclude") else None
    return success_envelope({"users": UserService.get_users_for_parent(exclude=exclude)})


@user_management_action("get_program_sites")
def get_program_sites(actor, data):
    program = sanitize_text(data.get("program"))
    if not program:
        raise ActionError("Program is required")
    return success_envelope({"sites": ProgramSiteService.get_sites_for_program(program)})


@user_management_action("get_all_sites")
def get_all_sites(actor, data):
    return success_envelope({"sites": ProgramSiteService.get_all_sites(sort=True)})
