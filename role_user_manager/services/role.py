import logging
from typing import Iterable, Optional, Union

from django.db import transaction

from role_user_manager.models import Role, UserRole
from role_user_manager.models.user import User
from role_user_manager.signals import user_role_changed
from role_user_manager.utils.choices import DefaultRoles
from role_user_manager.utils.functions import get_or_none, is_valid_role_name, update_record

logger = logging.getLogger(__name__)

PROTECTED_ROLES = [DefaultRoles.ADMINISTRATOR]


class RoleService:
    """
    The role registry: role names, display names, capabilities and role inheritance,
    plus the single "first role" assignment of a user.
    """

    @staticmethod
    def get_role(name: str) -> Optional[Role]:
        if not name:
            return None
        return get_or_none(Role.objects, name=name)

    @staticmethod
    def role_exists(name: str) -> bool:
        return bool(name) and Role.objects.filter(name=name).exists()

    @staticmethod
    def get_available_roles() -> dict[str, str]:
        return {role.name: role.display_name or role.name for role in Role.objects.all()}

    @staticmethod
    def get_role_display_name(name: str) -> str:
        if not name:
            return ""
        role = RoleService.get_role(name)
        if role and role.display_name:
            return role.display_name
        return name.replace("-", " ").replace("_", " ").capitalize()

    @staticmethod
    def set_role(user: User, role: str, actor: Optional[User] = None):
        """
        Replace every role of the user with the given one. An empty role leaves the user without roles.
        The caller is expected to have validated the role against the registry.
        """
        old_role = user.primary_role

        with transaction.atomic():
            UserRole.objects.filter(user=user).delete()
            if role:
                UserRole.objects.create(user=user, role=role)

        logger.info(f"Role of user {user.username} changed from '{old_role}' to '{role}'")
        user_role_changed.send(
            sender=RoleService, user=user, actor=actor, old_role=old_role, new_role=role
        )

    @staticmethod
    def get_role_capabilities(name: str) -> dict[str, bool]:
        role = RoleService.get_role(name)
        return dict(role.capabilities or {}) if role else {}

    @staticmethod
    def update_role_capabilities(name: str, capabilities: Union[Iterable[str], dict]) -> bool:
        role = RoleService.get_role(name)
        if role is None:
            return False

        if isinstance(capabilities, dict):
            new_capabilities = {cap: bool(granted) for cap, granted in capabilities.items() if cap}
        else:
            new_capabilities = {cap: True for cap in capabilities if cap}

        update_record(role, capabilities=new_capabilities)
        logger.info(f"Capabilities of role {name} set to {sorted(new_capabilities)}")
        return True

    @staticmethod
    def create_role(name: str, display_name: str = "", parent_name: str = "") -> bool:
        if not is_valid_role_name(name) or RoleService.role_exists(name):
            return False

        parent = RoleService.get_role(parent_name) if parent_name else None
        if parent_name and parent is None:
            return False

        Role.objects.create(
            name=name,
            display_name=display_name or name,
            parent=parent,
            capabilities=dict(parent.capabilities or {}) if parent else {"read": True},
        )
        logger.info(f"New role created: {name}")
        return True

    @staticmethod
    def delete_role(name: str) -> bool:
        if name in PROTECTED_ROLES:
            logger.info(f"Refusing to delete protected role {name}")
            return False
        role = RoleService.get_role(name)
        if role is None:
            return False
        if UserRole.objects.filter(role=name).exists():
            logger.info(f"Refusing to delete role {name}: users are assigned to it")
            return False

        role.delete()
        logger.info(f"Role deleted: {name}")
        return True

    @staticmethod
    def inherit_parent_capabilities(name: str) -> bool:
        role = RoleService.get_role(name)
        if role is None or role.parent is None:
            return False

        capabilities = dict(role.parent.capabilities or {})
        capabilities.update(
            {cap: granted for cap, granted in (role.capabilities or {}).items() if granted}
        )
        update_record(role, capabilities=capabilities)
        logger.info(f"Inherited parent capabilities for role: {name}")
        return True

    @staticmethod
    def get_available_parent_roles() -> dict[str, str]:
        return RoleService.get_available_roles()
