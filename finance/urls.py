from django.urls import path
from . import views

app_name = 'finance'

urlpatterns = [
    # Salary lists
    path('salary/', views.salary_list, name='salary_list'),
    path('salary/create/', views.salary_create, name='salary_create'),
    path('salary/<int:pk>/edit/', views.salary_edit, name='salary_edit'),
    path('salary/delete/confirm/', views.salary_delete_confirm, name='salary_delete_confirm'),
    path('salary/delete/cancel/', views.salary_delete_cancel, name='salary_delete_cancel'),

    # Salary records of one list
    path('salary/<int:list_id>/records/', views.salary_record_list, name='salary_record_list'),
    path('salary/<int:list_id>/records/<int:pk>/payment/', views.salary_record_payment,
         name='salary_record_payment'),
    path('salary/<int:list_id>/records/delete/confirm/', views.salary_record_delete_confirm,
         name='salary_record_delete_confirm'),
    path('salary/<int:list_id>/records/delete/cancel/', views.salary_record_delete_cancel,
         name='salary_record_delete_cancel'),
]
