# navigation/urls.py
from django.urls import path

from . import views

app_name = 'navigation'

urlpatterns = [
    path('', views.NavigationView.as_view(), name='navigation'),
    path('search/', views.NavigationSearchView.as_view(), name='search'),
    path('breadcrumbs/', views.BreadcrumbView.as_view(), name='breadcrumbs'),
    path('validate/', views.NavigationValidationView.as_view(), name='validate'),
]
