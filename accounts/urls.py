from django.urls import path
from . import views

app_name = 'accounts'

urlpatterns = [
    path('login/', views.login_view, name='login'),
    path('logout/', views.logout_view, name='logout'),

    # Users
    path('users/', views.user_list, name='user_list'),
    path('users/create/', views.user_create, name='user_create'),
    path('users/<int:pk>/edit/', views.user_edit, name='user_edit'),
    path('users/delete/confirm/', views.user_delete_confirm, name='user_delete_confirm'),
    path('users/delete/cancel/', views.user_delete_cancel, name='user_delete_cancel'),
]
