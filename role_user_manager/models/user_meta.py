from django.db import models


class UserMeta(models.Model):
    user = models.ForeignKey(
        to="role_user_manager.User", related_name="meta", on_delete=models.CASCADE
    )
    meta_key = models.CharField(max_length=255, db_index=True)
    meta_value = models.JSONField(null=True, blank=True)

    class Meta:
        unique_together = [("user", "meta_key")]

    def __str__(self):
        return f"{self.user_id}:{self.meta_key}"
