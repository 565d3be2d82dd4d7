"""
The fields of a user that can be edited inline from the management table.

Each field is bound to one accessor class. The set is closed: any other field name is
rejected before a user is touched.
"""
import logging
from typing import Any, Optional

from role_user_manager.models.user import User
from role_user_manager.services.role import RoleService
from role_user_manager.services.user import UserService
from role_user_manager.utils.choices import MetaKeys
from role_user_manager.utils.exceptions import ActionError, InvalidField
from role_user_manager.utils.functions import sanitize_text, split_sites, to_int

logger = logging.getLogger(__name__)


class EditableField:
    name: str = None
    success_message: str = None

    @classmethod
    def read(cls, user: User) -> Any:
        raise NotImplementedError

    @classmethod
    def write(cls, user: User, value: Any, actor: Optional[User] = None):
        raise NotImplementedError

    @classmethod
    def update(cls, user: User, value: Any, actor: Optional[User] = None) -> str:
        cls.write(user, value, actor=actor)
        logger.info(f"Field {cls.name} of user {user.username} updated by {actor}")
        return cls.success_message


class RoleField(EditableField):
    name = "role"
    success_message = "User role updated successfully"

    @classmethod
    def read(cls, user: User) -> str:
        return user.primary_role

    @classmethod
    def write(cls, user: User, value: Any, actor: Optional[User] = None):
        role = sanitize_text(value)
        if not RoleService.role_exists(role):
            raise ActionError("Invalid role specified")
        RoleService.set_role(user, role, actor=actor)


class ProgramField(EditableField):
    name = "program"
    success_message = "Program updated successfully"

    @classmethod
    def read(cls, user: User) -> str:
        return UserService.get_meta(user, MetaKeys.PROGRAMME, "")

    @classmethod
    def write(cls, user: User, value: Any, actor: Optional[User] = None):
        UserService.update_meta(user, MetaKeys.PROGRAMME, sanitize_text(value))


class SitesField(EditableField):
    name = "sites"
    success_message = "Sites updated successfully"

    @classmethod
    def read(cls, user: User) -> list[str]:
        return UserService.get_sites(user)

    @classmethod
    def write(cls, user: User, value: Any, actor: Optional[User] = None):
        UserService.update_meta(user, MetaKeys.SITES, split_sites(value))


class ParentField(EditableField):
    """
    Self-parenting is only prevented by the dropdown, which omits the edited user.
    It is accepted here and logged by UserService.set_parent.
    """

    name = "parent"
    success_message = "Parent user updated successfully"

    @classmethod
    def read(cls, user: User) -> Optional[User]:
        return UserService.get_parent(user)

    @classmethod
    def write(cls, user: User, value: Any, actor: Optional[User] = None):
        # An empty value or 0 clears the parent
        parent_id = to_int(value) if value not in (None, "", "0", 0) else None
        if parent_id is not None and parent_id <= 0:
            raise ActionError("Invalid parent user")
        UserService.set_parent(user, parent_id, actor=actor)


EDITABLE_FIELDS: dict[str, type[EditableField]] = {
    field.name: field for field in (RoleField, ProgramField, SitesField, ParentField)
}


def get_editable_field(name: str) -> type[EditableField]:
    try:
        return EDITABLE_FIELDS[name]
    except KeyError:
        raise InvalidField() from None
