from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    display_name = models.CharField(
        max_length=250, blank=True, help_text="Name shown in listings and exports. Defaults to the username."
    )

    def __str__(self):
        return self.display_name or self.username

    def save(self, *args, **kwargs):
        if not self.display_name:
            self.display_name = self.get_full_name() or self.username
        super().save(*args, **kwargs)

    @property
    def roles(self) -> list[str]:
        return [user_role.role for user_role in sorted(self.user_roles.all(), key=lambda r: r.pk)]

    @property
    def primary_role(self) -> str:
        """
        Only the first role is ever read or written by the user management screens.
        """
        roles = self.roles
        return roles[0] if roles else ""
