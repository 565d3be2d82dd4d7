from typing import Optional

from django.template.loader import render_to_string
from django.utils.html import escape, format_html
from django.utils.safestring import SafeString, mark_safe
from django.utils.text import capfirst

from role_user_manager.models.user import User
from role_user_manager.services.fields import ParentField, ProgramField, RoleField, SitesField
from role_user_manager.services.hierarchy import HierarchyService
from role_user_manager.services.user import UserService
from role_user_manager.typing import TrainingStats, UserDetails
from role_user_manager.utils.choices import MetaKeys
from role_user_manager.utils.functions import format_short_date

NOT_SET = mark_safe("<em>Not set</em>")
NO_PARENT = mark_safe("<em>No parent</em>")
UNKNOWN_USER = "Unknown"


def role_display(user: User) -> str:
    return escape(capfirst(user.primary_role))


def program_display(user: User) -> SafeString:
    program = UserService.get_meta(user, MetaKeys.PROGRAMME)
    return format_html("{}", program) if program else NOT_SET


def sites_display(user: User) -> SafeString:
    sites = UserService.get_sites(user)
    return format_html("{}", ", ".join(sites)) if sites else NOT_SET


def parent_display(user: User) -> SafeString:
    if not UserService.get_parent_id(user):
        return NO_PARENT
    parent = UserService.get_parent(user)
    return format_html("{}", parent.display_name if parent else UNKNOWN_USER)


FIELD_DISPLAYS = {
    RoleField.name: role_display,
    ProgramField.name: program_display,
    SitesField.name: sites_display,
    ParentField.name: parent_display,
}


def field_display_value(user: User, field_name: str) -> str:
    """
    The value shown in a cell of the management table after an inline edit.
    """
    display = FIELD_DISPLAYS.get(field_name)
    return display(user) if display else ""


def render_user_details(user_data: UserDetails, export_nonce: Optional[str] = None) -> str:
    descendants = user_data.get("descendants") or []
    return render_to_string(
        "role_user_manager/user_details.html",
        {
            "user_data": user_data,
            "registration_date": format_short_date(user_data.get("registration_date")),
            "descendants": descendants,
            "team_size": HierarchyService.count(descendants),
            "show_export": bool(user_data.get("can_export") and descendants),
            "export_nonce": export_nonce,
        },
    )


def render_user_training(user: User, stats: Optional[TrainingStats] = None) -> str:
    parent = UserService.get_parent(user)
    return render_to_string(
        "role_user_manager/user_training.html",
        {
            "user": user,
            "roles": ", ".join(user.roles),
            "parent_name": parent.display_name if parent else "None",
            "program": UserService.get_meta(user, MetaKeys.PROGRAM) or "None",
            "site": UserService.get_meta(user, MetaKeys.SITE) or "None",
            "stats": stats,
        },
    )
