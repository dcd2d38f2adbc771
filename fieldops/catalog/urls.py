from django.urls import path
from .views import brand_list_create, brand_detail

urlpatterns = [
    path('brands/', brand_list_create, name='brand-list-create'),
    path('brands/<int:pk>/', brand_detail, name='brand-detail'),
]
