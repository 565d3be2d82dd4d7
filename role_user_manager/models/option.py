from django.db import models


class Option(models.Model):
    name = models.CharField(max_length=191, unique=True)
    value = models.JSONField(null=True, blank=True)

    def __str__(self):
        return self.name
