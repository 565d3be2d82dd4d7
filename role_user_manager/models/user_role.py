from django.db import models


class UserRole(models.Model):
    user = models.ForeignKey(
        to="role_user_manager.User", related_name="user_roles", on_delete=models.CASCADE
    )
    role = models.CharField(
        max_length=140,
        help_text="The name of a Role in the registry. Not a foreign key, so that a deleted role "
                  "does not cascade to users."
    )

    class Meta:
        unique_together = [("user", "role")]

    def __str__(self):
        return f"{self.user} as {self.role}"
