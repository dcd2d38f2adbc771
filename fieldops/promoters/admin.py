from django.contrib import admin
from .models import Promoter


@admin.register(Promoter)
class PromoterAdmin(admin.ModelAdmin):
    list_display = ['name', 'user', 'phone', 'city', 'payment_per_visit', 'active', 'created_at']
    list_filter = ['active', 'city', 'user__agency']
    search_fields = ['name', 'phone', 'city', 'user__username', 'user__email']
    filter_horizontal = ['brands', 'stores']
    ordering = ['name']
