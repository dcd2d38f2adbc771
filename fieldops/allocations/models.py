from django.db import models


class Allocation(models.Model):
    """Recurring assignment of a promoter to a brand at a store on fixed weekdays"""
    promoter = models.ForeignKey('promoters.Promoter', on_delete=models.CASCADE, related_name='allocations')
    brand = models.ForeignKey('catalog.Brand', on_delete=models.CASCADE, related_name='allocations')
    store = models.ForeignKey('locations.Store', on_delete=models.CASCADE, related_name='allocations')
    # Sorted weekday ints, 0=Sunday .. 6=Saturday
    days_of_week = models.JSONField(default=list)
    frequency_per_week = models.PositiveSmallIntegerField()
    active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.promoter} / {self.brand} @ {self.store}"

    class Meta:
        db_table = 'promoter_allocations'
        ordering = ['-created_at']
        unique_together = [['promoter', 'brand', 'store']]
        indexes = [
            models.Index(fields=['promoter', 'store', 'active'], name='alloc_promoter_store_idx'),
        ]
