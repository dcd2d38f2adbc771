from django.urls import path
from .views import allocation_list_create, allocation_detail, allocation_suggestions

urlpatterns = [
    path('allocations/', allocation_list_create, name='allocation-list-create'),
    path('allocations/suggestions/<int:promoter_id>/<int:brand_id>/<int:store_id>/',
         allocation_suggestions, name='allocation-suggestions'),
    path('allocations/<int:pk>/', allocation_detail, name='allocation-detail'),
]
