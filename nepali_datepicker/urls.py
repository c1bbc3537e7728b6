from django.urls import path
from . import views

app_name = 'nepali_datepicker'

urlpatterns = [
    # Conversion API
    path('convert/ad-to-bs/', views.ad_to_bs_view, name='ad_to_bs'),
    path('convert/bs-to-ad/', views.bs_to_ad_view, name='bs_to_ad'),

    # Picker
    path('calendar/<int:year>/<int:month>/', views.calendar_view, name='calendar'),
    path('calendar/<int:year>/export/', views.export_calendar_view, name='export_calendar'),
]
