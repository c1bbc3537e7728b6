# datepicker_site/urls.py
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),
    path('bs/', include('nepali_datepicker.urls')),
]
