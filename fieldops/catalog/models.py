from django.db import models
from decimal import Decimal


class Brand(models.Model):
    """Brands an agency merchandises"""
    agency = models.ForeignKey('core.Agency', on_delete=models.CASCADE, related_name='brands')
    name = models.CharField(max_length=200, db_index=True)
    visit_frequency = models.PositiveIntegerField(default=1)  # visits per week per store
    price_per_visit = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    stores = models.ManyToManyField('locations.Store', through='BrandStore', related_name='brands', blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'brands'
        ordering = ['name']


class BrandStore(models.Model):
    """Presence of a brand in a store"""
    brand = models.ForeignKey(Brand, on_delete=models.CASCADE, related_name='brand_stores')
    store = models.ForeignKey('locations.Store', on_delete=models.CASCADE, related_name='brand_stores')
    # Overrides the brand's weekly frequency for this store when set
    visit_frequency = models.PositiveIntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.brand.name} @ {self.store.chain_name}"

    class Meta:
        db_table = 'brand_stores'
        unique_together = [['brand', 'store']]
