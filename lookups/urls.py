# lookups/urls.py
from django.urls import path

from . import views

app_name = 'lookups'

urlpatterns = [
    path('', views.LookupCategoryListView.as_view(), name='categories'),
    path('common/', views.CommonLookupsView.as_view(), name='common'),
    path('<slug:category_code>/values/', views.LookupValueListView.as_view(), name='values'),
]
