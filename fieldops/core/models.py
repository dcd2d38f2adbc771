from django.contrib.auth.models import AbstractUser
from django.db import models


class Agency(models.Model):
    """Merchandising agency (tenant)"""
    name = models.CharField(max_length=200)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'agencies'
        verbose_name_plural = 'agencies'


class User(AbstractUser):
    """Extended user model with role and agency"""
    ROLE_SYSTEM_ADMIN = 'system_admin'
    ROLE_AGENCY = 'agency'
    ROLE_PROMOTER = 'promoter'
    ROLE_CHOICES = [
        (ROLE_SYSTEM_ADMIN, 'System Admin'),
        (ROLE_AGENCY, 'Agency'),
        (ROLE_PROMOTER, 'Promoter'),
    ]

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_AGENCY)
    # System admins have no agency
    agency = models.ForeignKey(Agency, on_delete=models.CASCADE, null=True, blank=True, related_name='users')
    phone = models.CharField(max_length=20, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def is_system_admin(self):
        return self.role == self.ROLE_SYSTEM_ADMIN

    class Meta:
        db_table = 'users'
