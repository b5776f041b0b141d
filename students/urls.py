from django.urls import path
from . import views

app_name = 'students'

urlpatterns = [
    # Students
    path('', views.student_list, name='student_list'),
    path('create/', views.student_create, name='student_create'),
    path('<int:pk>/edit/', views.student_edit, name='student_edit'),
    path('<int:pk>/point/', views.student_point, name='student_point'),
    path('<int:pk>/heart/', views.student_heart, name='student_heart'),
    path('<int:pk>/level/', views.student_level, name='student_level'),
    path('delete/confirm/', views.student_delete_confirm, name='student_delete_confirm'),
    path('delete/cancel/', views.student_delete_cancel, name='student_delete_cancel'),

    # Registrations
    path('registrations/', views.registration_list, name='registration_list'),
    path('registrations/delete/confirm/', views.registration_delete_confirm, name='registration_delete_confirm'),
    path('registrations/delete/cancel/', views.registration_delete_cancel, name='registration_delete_cancel'),
]
