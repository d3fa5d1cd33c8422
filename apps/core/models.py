# apps/core/models.py
from django.db import models


class StoredDocument(models.Model):
    """One document of the tracker's document store (collection + key -> JSON)."""
    collection = models.CharField(max_length=100, db_index=True)
    key = models.CharField(max_length=255)
    data = models.JSONField(default=dict, blank=True)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ('collection', 'key')
        ordering = ['collection', 'key']

    def __str__(self):
        return f"{self.collection}/{self.key}"
