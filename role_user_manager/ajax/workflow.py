from role_user_manager.ajax.registry import ajax_action, success_envelope
from role_user_manager.services.role import RoleService
from role_user_manager.services.user import UserService
from role_user_manager.services.workflow import PromotionWorkflowService
from role_user_manager.utils.choices import Capabilities, NonceActions, PromotionStatus
from role_user_manager.utils.exceptions import ActionError
from role_user_manager.utils.functions import sanitize_role, sanitize_text, to_int


@ajax_action("promote_user_direct", capability=Capabilities.EDIT_USERS, nonce=NonceActions.PROMOTION)
def promote_user_direct(actor, data):
    user_id = to_int(data.get("user_id"))
    requested_role = sanitize_role(data.get("requested_role"))

    if user_id <= 0:
        raise ActionError("Invalid user ID")
    if not RoleService.role_exists(requested_role):
        raise ActionError("Invalid role")

    user = UserService.get_user(user_id)
    if user is None:
        raise ActionError("User not found")

    PromotionWorkflowService.promote_directly(user, requested_role, actor=actor)
    return success_envelope(message="User promoted successfully")


@ajax_action("submit_promotion_request", nonce=NonceActions.PROMOTION)
def submit_promotion_request(actor, data):
    user = UserService.get_user(data.get("user_id"))
    if user is None:
        raise ActionError("User not found")

    current_role = user.primary_role
    requested_role = sanitize_role(data.get("requested_role"))
    reason = sanitize_text(data.get("reason"))

    if errors := PromotionWorkflowService.validate_request(
        actor, user, current_role, requested_role, reason
    ):
        raise ActionError(", ".join(errors))

    promotion_request = PromotionWorkflowService.create_request(
        actor, user, current_role, requested_role, reason
    )
    return success_envelope(
        {"request_id": promotion_request.pk}, "Promotion request submitted successfully"
    )


def _get_request_id(data) -> int:
    request_id = to_int(data.get("request_id"))
    if request_id <= 0:
        raise ActionError("Invalid request ID")
    return request_id


@ajax_action(
    "approve_promotion_request", capability=Capabilities.EDIT_USERS, nonce=NonceActions.WORKFLOW
)
def approve_promotion_request(actor, data):
    request_id = _get_request_id(data)
    admin_notes = sanitize_text(data.get("admin_notes"))
    if not PromotionWorkflowService.approve_request(request_id, admin_notes, actor=actor):
        raise ActionError("Failed to approve promotion request")
    return success_envelope(message="Promotion request approved successfully")


@ajax_action(
    "reject_promotion_request", capability=Capabilities.EDIT_USERS, nonce=NonceActions.WORKFLOW
)
def reject_promotion_request(actor, data):
    request_id = _get_request_id(data)
    admin_notes = sanitize_text(data.get("admin_notes"))
    if not PromotionWorkflowService.reject_request(request_id, admin_notes, actor=actor):
        raise ActionError("Failed to reject promotion request")
    return success_envelope(message="Promotion request rejected successfully")


@ajax_action("get_promotion_requests", capability=Capabilities.EDIT_USERS)
def get_promotion_requests(actor, data):
    status = sanitize_text(data.get("status"))
    if status and status not in PromotionStatus.values():
        raise ActionError("Invalid status")
    return success_envelope(PromotionWorkflowService.get_requests(status=status or None))
