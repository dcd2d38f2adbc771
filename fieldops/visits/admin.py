from django.contrib import admin
from .models import Visit


@admin.register(Visit)
class VisitAdmin(admin.ModelAdmin):
    list_display = ['promoter', 'brand', 'store', 'timestamp', 'status']
    list_filter = ['status', 'brand', 'store', 'timestamp']
    search_fields = ['promoter__name', 'brand__name', 'store__chain_name', 'notes']
    ordering = ['-timestamp']
    date_hierarchy = 'timestamp'
