"""
URL configuration for the fieldops backend.

Every app mounts its routes under ``/api/v1/``; the Django admin lives at
``/admin/``.
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "FieldOps Administration"
admin.site.site_title = "FieldOps Admin Portal"
admin.site.index_title = "Agencies, promoters and allocations"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('fieldops.core.urls')),
    path('api/v1/', include('fieldops.locations.urls')),
    path('api/v1/', include('fieldops.catalog.urls')),
    path('api/v1/', include('fieldops.promoters.urls')),
    path('api/v1/', include('fieldops.allocations.urls')),
    path('api/v1/', include('fieldops.visits.urls')),
    path('api/v1/', include('fieldops.reports.urls')),
]
