from django.urls import path
from . import views

urlpatterns = [
    path('visits/', views.visit_list_create, name='visit-list-create'),
    path('visits/my-visits/', views.my_visits, name='my-visits'),
    path('visits/<int:pk>/', views.visit_detail, name='visit-detail'),
]
