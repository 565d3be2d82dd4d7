import logging

from role_user_manager.ajax.registry import ajax_action, success_envelope
from role_user_manager.services.role import RoleService
from role_user_manager.utils.choices import Capabilities, NonceActions
from role_user_manager.utils.exceptions import ActionError
from role_user_manager.utils.functions import (
    get_list_param,
    is_valid_role_name,
    sanitize_role,
    sanitize_text,
)

logger = logging.getLogger(__name__)


def _get_existing_role(data) -> str:
    role = sanitize_role(data.get("role"))
    if not RoleService.role_exists(role):
        raise ActionError("Invalid role")
    return role


@ajax_action(
    "update_role_capabilities",
    capability=Capabilities.MANAGE_OPTIONS,
    nonce=NonceActions.ROLE_MANAGER,
)
def update_role_capabilities(actor, data):
    role = _get_existing_role(data)
    capabilities = [sanitize_text(cap) for cap in get_list_param(data, "capabilities")]

    if not RoleService.update_role_capabilities(role, capabilities):
        raise ActionError("Failed to update role capabilities")

    logger.info(f"Capabilities of role {role} updated by {actor.username}")
    return success_envelope(message="Role capabilities updated successfully")


@ajax_action("create_role", capability=Capabilities.MANAGE_OPTIONS, nonce=NonceActions.ROLE_MANAGER)
def create_role(actor, data):
    role_name = sanitize_role(data.get("role_name"))
    display_name = sanitize_text(data.get("role_display_name"))
    parent_role = sanitize_role(data.get("parent_role"))

    if not is_valid_role_name(role_name):
        raise ActionError("Invalid role name")

    if not RoleService.create_role(role_name, display_name, parent_role):
        raise ActionError("Failed to create role")

    return success_envelope(message="Role created successfully")


@ajax_action("delete_role", capability=Capabilities.MANAGE_OPTIONS, nonce=NonceActions.ROLE_MANAGER)
def delete_role(actor, data):
    role = _get_existing_role(data)
    if not RoleService.delete_role(role):
        raise ActionError("Failed to delete role")
    return success_envelope(message="Role deleted successfully")


@ajax_action("get_role_capabilities", capability=Capabilities.MANAGE_OPTIONS)
def get_role_capabilities(actor, data):
    role = _get_existing_role(data)
    return success_envelope(RoleService.get_role_capabilities(role))


@ajax_action(
    "inherit_parent_capabilities",
    capability=Capabilities.MANAGE_OPTIONS,
    nonce=NonceActions.ROLE_MANAGER,
)
def inherit_parent_capabilities(actor, data):
    role = _get_existing_role(data)
    if not RoleService.inherit_parent_capabilities(role):
        raise ActionError("Failed to inherit parent capabilities")
    return success_envelope(message="Parent capabilities inherited successfully")


@ajax_action("get_parent_options", capability=Capabilities.MANAGE_OPTIONS)
def get_parent_options(actor, data):
    return success_envelope(RoleService.get_available_parent_roles())
