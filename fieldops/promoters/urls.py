from django.urls import path
from .views import promoter_list_create, promoter_detail

urlpatterns = [
    path('promoters/', promoter_list_create, name='promoter-list-create'),
    path('promoters/<int:pk>/', promoter_detail, name='promoter-detail'),
]
