import logging
from functools import wraps
from typing import Iterable

from django.core.exceptions import PermissionDenied

from role_user_manager.models import Role
from role_user_manager.settings import EXPORT_ROLES
from role_user_manager.utils.choices import Capabilities

logger = logging.getLogger(__name__)


def _is_authenticated(actor) -> bool:
    return bool(actor is not None and actor.is_authenticated)


def roles_grant(actor, capability: str) -> bool:
    """
    Whether any of the actor's roles grants the capability. Superuser status is not considered.
    """
    if not _is_authenticated(actor):
        return False
    return any(
        role.has_capability(capability) for role in Role.objects.filter(name__in=actor.roles)
    )


def user_can(actor, capability: str) -> bool:
    if not _is_authenticated(actor) or not actor.is_active:
        return False
    if actor.is_superuser:
        return True
    return roles_grant(actor, capability)


def has_any_role(actor, roles: Iterable[str]) -> bool:
    if not _is_authenticated(actor):
        return False
    return bool(set(actor.roles) & set(roles))


def can_export_team(actor) -> bool:
    return has_any_role(actor, EXPORT_ROLES)


def capability_required(capability: str):
    """
    Decorator for plain Django views: respond 403 unless the current user holds the capability.
    """

    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            if not user_can(request.user, capability):
                logger.info(f"Denied {request.path} to {request.user}: missing {capability}")
                raise PermissionDenied(
                    "You do not have sufficient permissions to access this page."
                )
            return view_func(request, *args, **kwargs)

        return wrapper

    return decorator


def can_export_users(actor) -> bool:
    """
    The dashboard users export is closed to roles flagged with data_viewer_export.
    """
    return user_can(actor, Capabilities.EDIT_USERS) and not roles_grant(
        actor, Capabilities.DATA_VIEWER_EXPORT
    )
