from django.urls import path
from . import views

app_name = 'teachers'

urlpatterns = [
    path('', views.teacher_list, name='teacher_list'),
    path('<int:pk>/edit/', views.teacher_edit, name='teacher_edit'),
    path('delete/confirm/', views.teacher_delete_confirm, name='teacher_delete_confirm'),
    path('delete/cancel/', views.teacher_delete_cancel, name='teacher_delete_cancel'),
]
