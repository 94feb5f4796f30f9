"""URL routes for files app."""

from django.urls import path

from server.apps.files import views

app_name = 'files'

urlpatterns = [
    path('', views.file_collection, name='collection'),
    path('<str:name>/', views.file_detail, name='detail'),
]
