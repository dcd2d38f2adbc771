from django.db import models
from django.utils import timezone


class Visit(models.Model):
    """Executed store visit by a promoter for a brand"""
    STATUS_COMPLETED = 'completed'
    STATUS_EDITED = 'edited'
    STATUS_CHOICES = [
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_EDITED, 'Edited'),
    ]

    promoter = models.ForeignKey('promoters.Promoter', on_delete=models.CASCADE, related_name='visits')
    store = models.ForeignKey('locations.Store', on_delete=models.CASCADE, related_name='visits')
    brand = models.ForeignKey('catalog.Brand', on_delete=models.CASCADE, related_name='visits')
    gps_latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    gps_longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    timestamp = models.DateTimeField(default=timezone.now, db_index=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_COMPLETED)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Visit {self.pk} - {self.promoter} @ {self.store}"

    class Meta:
        db_table = 'visits'
        ordering = ['-timestamp']
