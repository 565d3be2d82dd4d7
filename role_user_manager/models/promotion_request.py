from django.db import models

from role_user_manager.utils.choices import PromotionStatus


class PromotionRequest(models.Model):
    requester = models.ForeignKey(
        to="role_user_manager.User",
        related_name="submitted_promotion_requests",
        on_delete=models.CASCADE,
    )
    user = models.ForeignKey(
        to="role_user_manager.User",
        related_name="promotion_requests",
        on_delete=models.CASCADE,
        help_text="The user whose role would change.",
    )
    current_role = models.CharField(max_length=140, blank=True)
    requested_role = models.CharField(max_length=140)
    reason = models.TextField()
    status = models.CharField(
        max_length=20, choices=PromotionStatus.as_list(), default=PromotionStatus.PENDING
    )
    admin_notes = models.TextField(blank=True)
    processed_by = models.ForeignKey(
        to="role_user_manager.User",
        null=True,
        blank=True,
        related_name="processed_promotion_requests",
        on_delete=models.SET_NULL,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    processed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at", "-pk"]

    def __str__(self):
        return f"{self.user} -> {self.requested_role} ({self.status})"
