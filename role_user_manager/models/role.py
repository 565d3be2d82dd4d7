from django.db import models


class Role(models.Model):
    name = models.CharField(max_length=140, unique=True)
    display_name = models.CharField(max_length=250, blank=True)
    capabilities = models.JSONField(
        default=dict,
        blank=True,
        help_text="Map of capability name to granted flag, in the form: {'edit_users': true, 'read': true}"
    )
    parent = models.ForeignKey(
        to="self",
        null=True,
        blank=True,
        related_name="children",
        on_delete=models.SET_NULL,
        help_text="Role whose capabilities this role can inherit."
    )

    class Meta:
        ordering = ["pk"]

    def __str__(self):
        return self.display_name or self.name

    def has_capability(self, capability: str) -> bool:
        return bool((self.capabilities or {}).get(capability))
