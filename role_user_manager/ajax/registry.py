"""
Registry of the server actions reachable through the dispatcher.

Each action declares what the actor needs before the handler runs:

    @ajax_action("delete_user", capability=Capabilities.DELETE_USERS, nonce=NonceActions.DASHBOARD)
    def delete_user(actor, data):
        ...

The checks always run in the same order: logged in, capability, security token.
A handler receives the actor and the request data and returns an envelope, or raises ActionError.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from role_user_manager.auth import user_can, verify_nonce
from role_user_manager.utils.exceptions import (
    ActionError,
    InsufficientPermissions,
    InvalidNonce,
    NotLoggedIn,
    UnknownAction,
)

logger = logging.getLogger(__name__)

Envelope = dict[str, Any]
Permission = Union[str, Callable[[Any], bool], None]

DEFAULT_PERMISSION_MESSAGE = "Insufficient permissions"


def success_envelope(data: Any = None, message: str = "") -> Envelope:
    return {"success": True, "data": data, "message": message}


def error_envelope(message: str, data: Any = None) -> Envelope:
    return {"success": False, "data": data, "message": message}


def check_access(
    actor,
    data,
    permission: Permission = None,
    nonce: Optional[str] = None,
    permission_message: str = DEFAULT_PERMISSION_MESSAGE,
):
    """
    Raises the ActionError matching the first failed check.

    Args:
        actor:              The current user
        data:               The request data, holding the security token under "nonce"
        permission:         A capability name, a predicate on the actor, or None when being logged in is enough
        nonce:              The scope of the security token, or None when the action takes no token
        permission_message: Message of the error when the permission is missing
    """
    if actor is None or not actor.is_authenticated:
        raise NotLoggedIn()

    if permission is not None:
        allowed = permission(actor) if callable(permission) else user_can(actor, permission)
        if not allowed:
            raise InsufficientPermissions(permission_message)

    if nonce is not None and not verify_nonce(data.get("nonce"), actor, nonce):
        raise InvalidNonce()


@dataclass
class AjaxAction:
    name: str
    handler: Callable[[Any, Any], Envelope]
    permission: Permission = None
    nonce: Optional[str] = None
    permission_message: str = DEFAULT_PERMISSION_MESSAGE

    def __call__(self, actor, data) -> Envelope:
        check_access(actor, data, self.permission, self.nonce, self.permission_message)
        return self.handler(actor, data)


ACTIONS: dict[str, AjaxAction] = {}


def ajax_action(
    name: str,
    capability: Permission = None,
    nonce: Optional[str] = None,
    permission_message: str = DEFAULT_PERMISSION_MESSAGE,
):
    def decorator(handler):
        ACTIONS[name] = AjaxAction(
            name=name,
            handler=handler,
            permission=capability,
            nonce=nonce,
            permission_message=permission_message,
        )
        return handler

    return decorator


def get_action(name: str) -> AjaxAction:
    try:
        return ACTIONS[name]
    except KeyError:
        raise UnknownAction(name) from None


def dispatch(name: str, actor, data) -> Envelope:
    try:
        return get_action(name)(actor, data)
    except ActionError as e:
        logger.info(f"Action {name} refused for {actor}: {e.message}")
        return error_envelope(e.message, e.data)
