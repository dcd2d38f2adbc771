from django.db import models
from decimal import Decimal
from fieldops.core.models import User


class Promoter(models.Model):
    """Field promoter performing store visits"""
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='promoter')
    name = models.CharField(max_length=200)
    phone = models.CharField(max_length=20)
    city = models.CharField(max_length=100)
    # Weekdays the promoter can work (0=Sunday .. 6=Saturday); null means never declared
    availability_days = models.JSONField(null=True, blank=True)
    # brand id (as string) -> visits per week, overrides the brand's own frequency
    visit_frequency_per_brand = models.JSONField(default=dict, blank=True)
    payment_per_visit = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    active = models.BooleanField(default=True, db_index=True)
    brands = models.ManyToManyField('catalog.Brand', related_name='promoters', blank=True)
    stores = models.ManyToManyField('locations.Store', related_name='promoters', blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    @property
    def agency_id(self):
        return self.user.agency_id

    class Meta:
        db_table = 'promoters'
        ordering = ['name']
