from django.urls import path
from . import views

app_name = 'academics'

urlpatterns = [
    # Attendance lists
    path('attendance/', views.attendance_list, name='attendance_list'),
    path('attendance/<int:pk>/edit/', views.attendance_edit, name='attendance_edit'),
    path('attendance/delete/confirm/', views.attendance_delete_confirm, name='attendance_delete_confirm'),
    path('attendance/delete/cancel/', views.attendance_delete_cancel, name='attendance_delete_cancel'),

    # Attendance records of one list
    path('attendance/<int:list_id>/records/', views.attendance_record_list, name='attendance_record_list'),
    path('attendance/<int:list_id>/records/<int:pk>/edit/', views.attendance_record_edit, name='attendance_record_edit'),
    path('attendance/<int:list_id>/records/delete/confirm/', views.attendance_record_delete_confirm,
         name='attendance_record_delete_confirm'),
    path('attendance/<int:list_id>/records/delete/cancel/', views.attendance_record_delete_cancel,
         name='attendance_record_delete_cancel'),

    # Vocab lists
    path('vocab/', views.vocab_list_list, name='vocab_list_list'),
    path('vocab/create/', views.vocab_list_create, name='vocab_list_create'),
    path('vocab/<int:pk>/edit/', views.vocab_list_edit, name='vocab_list_edit'),
    path('vocab/delete/confirm/', views.vocab_list_delete_confirm, name='vocab_list_delete_confirm'),
    path('vocab/delete/cancel/', views.vocab_list_delete_cancel, name='vocab_list_delete_cancel'),

    # Words of one vocab list
    path('vocab/<int:list_id>/words/', views.vocab_word_list, name='vocab_word_list'),
    path('vocab/<int:list_id>/words/create/', views.vocab_word_create, name='vocab_word_create'),
    path('vocab/<int:list_id>/words/<int:pk>/edit/', views.vocab_word_edit, name='vocab_word_edit'),
    path('vocab/<int:list_id>/words/delete/confirm/', views.vocab_word_delete_confirm,
         name='vocab_word_delete_confirm'),
    path('vocab/<int:list_id>/words/delete/cancel/', views.vocab_word_delete_cancel,
         name='vocab_word_delete_cancel'),
]
