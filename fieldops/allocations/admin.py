from django.contrib import admin
from .models import Allocation


@admin.register(Allocation)
class AllocationAdmin(admin.ModelAdmin):
    list_display = ['promoter', 'brand', 'store', 'days_of_week', 'frequency_per_week', 'active', 'created_at']
    list_filter = ['active', 'brand', 'store']
    search_fields = ['promoter__name', 'brand__name', 'store__chain_name']
    ordering = ['-created_at']
    readonly_fields = ['created_at', 'updated_at']
