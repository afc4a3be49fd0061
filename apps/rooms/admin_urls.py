from django.urls import path
from .views import available_rooms

urlpatterns = [
    path('rooms/available/', available_rooms, name='admin-available-rooms'),
]
