from django.urls import path

from . import views

urlpatterns = [
    path('sign-in/', views.sign_in, name='sign_in'),
    path('auth/callback/', views.auth_callback, name='auth_callback'),
    path('sign-out/', views.sign_out, name='sign_out'),
]
