from django.urls import path, include


urlpatterns = [
    path('', include('core.urls')),
    path('', include('accounts.urls')),
    path('students/', include('students.urls')),
    path('teachers/', include('teachers.urls')),
    path('academics/', include('academics.urls')),
    path('finance/', include('finance.urls')),
]
