from django.urls import path
from .views import CustomTokenObtainPairView, CustomTokenRefreshView, register, user_me

urlpatterns = [
    path('auth/register/', register, name='register'),
    path('auth/login/', CustomTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/refresh/', CustomTokenRefreshView.as_view(), name='token_refresh'),
    path('auth/me/', user_me, name='user-me'),
]
