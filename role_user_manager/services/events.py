import logging

from role_user_manager.producer import Producer
from role_user_manager.signals import (
    promotion_request_processed,
    promotion_request_submitted,
    user_parent_changed,
    user_role_changed,
)
from role_user_manager.typing import UserEventDict

logger = logging.getLogger(__name__)


class UserEventService:
    """
    Publishes user management changes to Kafka, so that other services are notified.
    Receivers are only connected when Kafka is configured.
    """

    @staticmethod
    def _send(event_type: str, user_id: int, actor, payload: dict):
        event: UserEventDict = {
            "event_type": event_type,
            "user_id": user_id,
            "actor_id": actor.pk if actor is not None else None,
            "payload": payload,
        }
        Producer().send_user_event(event)

    @staticmethod
    def process_role_changed(sender, user, actor=None, old_role="", new_role="", **kwargs):
        UserEventService._send(
            "role_changed", user.pk, actor, {"old_role": old_role, "new_role": new_role}
        )

    @staticmethod
    def process_parent_changed(
        sender, user, actor=None, old_parent_id=None, new_parent_id=None, **kwargs
    ):
        UserEventService._send(
            "parent_changed",
            user.pk,
            actor,
            {"old_parent_id": old_parent_id, "new_parent_id": new_parent_id},
        )

    @staticmethod
    def process_promotion_request(sender, promotion_request, actor=None, **kwargs):
        UserEventService._send(
            f"promotion_request_{promotion_request.status}",
            promotion_request.user_id,
            actor,
            {
                "request_id": promotion_request.pk,
                "current_role": promotion_request.current_role,
                "requested_role": promotion_request.requested_role,
            },
        )

    @staticmethod
    def connect():
        user_role_changed.connect(UserEventService.process_role_changed)
        user_parent_changed.connect(UserEventService.process_parent_changed)
        promotion_request_submitted.connect(UserEventService.process_promotion_request)
        promotion_request_processed.connect(UserEventService.process_promotion_request)
        logger.info("User management events will be published to Kafka")
