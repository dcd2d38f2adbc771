from django.db import models


class Store(models.Model):
    """Retail stores visited by promoters"""
    TYPE_CHOICES = [
        ('retail', 'Retail'),
        ('wholesale', 'Wholesale'),
    ]

    agency = models.ForeignKey('core.Agency', on_delete=models.CASCADE, related_name='stores')
    chain_name = models.CharField(max_length=200)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='retail')
    address = models.TextField(blank=True)
    gps_latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    gps_longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    radius_meters = models.PositiveIntegerField(default=100)  # check-in radius around the GPS point
    product_category = models.CharField(max_length=200, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.chain_name

    class Meta:
        db_table = 'stores'
        ordering = ['chain_name']
