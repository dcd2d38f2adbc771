from django.urls import path
from . import views

urlpatterns = [
    path('reports/financial/', views.financial_report, name='financial-report'),
    path('reports/financial/export/', views.financial_report_export, name='financial-report-export'),
    path('reports/promoters/', views.promoter_report, name='promoter-report'),
    path('reports/brands/', views.brand_report, name='brand-report'),
    path('reports/stores/', views.store_report, name='store-report'),
    path('reports/to-be-paid/', views.to_be_paid_report, name='to-be-paid-report'),
    path('reports/to-be-received/', views.to_be_received_report, name='to-be-received-report'),
    path('reports/planned-visits/', views.planned_visits, name='planned-visits'),
    path('reports/brands-without-allocations/', views.brands_without_allocations, name='brands-without-allocations'),
]
