from django.contrib import admin
from .models import Brand, BrandStore


class BrandStoreInline(admin.TabularInline):
    model = BrandStore
    extra = 0
    fields = ['store', 'visit_frequency']


@admin.register(Brand)
class BrandAdmin(admin.ModelAdmin):
    list_display = ['name', 'agency', 'visit_frequency', 'price_per_visit', 'created_at']
    list_filter = ['agency', 'created_at']
    search_fields = ['name']
    ordering = ['name']
    inlines = [BrandStoreInline]


@admin.register(BrandStore)
class BrandStoreAdmin(admin.ModelAdmin):
    list_display = ['brand', 'store', 'visit_frequency', 'created_at']
    list_filter = ['brand__agency']
    search_fields = ['brand__name', 'store__chain_name']
