from django.contrib import admin
from .models import Store


@admin.register(Store)
class StoreAdmin(admin.ModelAdmin):
    list_display = ['chain_name', 'agency', 'type', 'address', 'radius_meters', 'created_at']
    list_filter = ['type', 'agency', 'created_at']
    search_fields = ['chain_name', 'address', 'product_category']
    ordering = ['chain_name']
