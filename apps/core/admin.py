from django.contrib import admin
from .models import StoredDocument

@admin.register(StoredDocument)
class StoredDocumentAdmin(admin.ModelAdmin):
    list_display = ('collection', 'key', 'updated_at')
    list_filter = ('collection',)
    search_fields = ('key',)
