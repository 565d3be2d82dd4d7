import logging
from typing import Optional

from django.db import transaction
from django.utils import timezone

from role_user_manager.models import PromotionRequest
from role_user_manager.models.user import User
from role_user_manager.services.role import RoleService
from role_user_manager.services.user import UserService
from role_user_manager.signals import promotion_request_processed, promotion_request_submitted
from role_user_manager.utils.choices import PromotionStatus
from role_user_manager.utils.functions import get_or_none, update_record

logger = logging.getLogger(__name__)


class PromotionWorkflowService:
    """
    Change-of-role proposals: submitted by a requester, then approved or rejected by a user manager.
    Only pending requests can be processed.
    """

    @staticmethod
    def validate_request(
        requester: User, user: User, current_role: str, requested_role: str, reason: str
    ) -> list[str]:
        errors = []
        if requester.pk == user.pk:
            errors.append("You cannot request a promotion for yourself")
        if not RoleService.role_exists(requested_role):
            errors.append("Invalid requested role")
        elif requested_role == current_role:
            errors.append("User already has the requested role")
        if not reason:
            errors.append("Reason is required")
        if PromotionRequest.objects.filter(user=user, status=PromotionStatus.PENDING).exists():
            errors.append("A pending promotion request already exists for this user")
        return errors

    @staticmethod
    def create_request(
        requester: User, user: User, current_role: str, requested_role: str, reason: str
    ) -> PromotionRequest:
        promotion_request = PromotionRequest.objects.create(
            requester=requester,
            user=user,
            current_role=current_role,
            requested_role=requested_role,
            reason=reason,
        )
        logger.info(
            f"Promotion request {promotion_request.pk} submitted by {requester.username} "
            f"for {user.username}: {current_role} -> {requested_role}"
        )
        promotion_request_submitted.send(
            sender=PromotionWorkflowService, promotion_request=promotion_request, actor=requester
        )
        return promotion_request

    @staticmethod
    def _get_pending(request_id: int) -> Optional[PromotionRequest]:
        return get_or_none(
            PromotionRequest.objects.select_related("user"),
            pk=request_id,
            status=PromotionStatus.PENDING,
        )

    @staticmethod
    def _process(promotion_request: PromotionRequest, status: str, admin_notes: str, actor: User):
        update_record(
            promotion_request,
            status=status,
            admin_notes=admin_notes,
            processed_by=actor,
            processed_at=timezone.now(),
        )
        logger.info(f"Promotion request {promotion_request.pk} {status} by {actor.username}")
        promotion_request_processed.send(
            sender=PromotionWorkflowService, promotion_request=promotion_request, actor=actor
        )

    @staticmethod
    def approve_request(request_id: int, admin_notes: str, actor: User) -> bool:
        with transaction.atomic():
            promotion_request = PromotionWorkflowService._get_pending(request_id)
            if promotion_request is None:
                return False
            if not RoleService.role_exists(promotion_request.requested_role):
                logger.info(
                    f"Promotion request {request_id} targets a removed role "
                    f"{promotion_request.requested_role}"
                )
                return False

            RoleService.set_role(promotion_request.user, promotion_request.requested_role, actor=actor)
            PromotionWorkflowService._process(
                promotion_request, PromotionStatus.APPROVED, admin_notes, actor
            )
        return True

    @staticmethod
    def reject_request(request_id: int, admin_notes: str, actor: User) -> bool:
        with transaction.atomic():
            promotion_request = PromotionWorkflowService._get_pending(request_id)
            if promotion_request is None:
                return False
            PromotionWorkflowService._process(
                promotion_request, PromotionStatus.REJECTED, admin_notes, actor
            )
        return True

    @staticmethod
    def get_requests(status: Optional[str] = None) -> list[dict]:
        requests = PromotionRequest.objects.select_related("requester", "user", "processed_by")
        if status:
            requests = requests.filter(status=status)
        return [
            {
                "id": promotion_request.pk,
                "requester_id": promotion_request.requester_id,
                "requester_name": promotion_request.requester.display_name,
                "user_id": promotion_request.user_id,
                "user_name": promotion_request.user.display_name,
                "current_role": promotion_request.current_role,
                "requested_role": promotion_request.requested_role,
                "reason": promotion_request.reason,
                "status": promotion_request.status,
                "admin_notes": promotion_request.admin_notes,
                "created_at": promotion_request.created_at.isoformat(),
                "processed_at": (
                    promotion_request.processed_at.isoformat() if promotion_request.processed_at else None
                ),
            }
            for promotion_request in requests
        ]

    @staticmethod
    @transaction.atomic
    def promote_directly(user: User, requested_role: str, actor: User):
        """
        Set the role right away and make the promoter the parent of the promoted user.
        """
        old_role = user.primary_role
        RoleService.set_role(user, requested_role, actor=actor)
        UserService.set_parent(user, actor.pk, actor=actor)
        logger.info(
            f"User {user.username} promoted from '{old_role}' to '{requested_role}' by {actor.username}"
        )
