from django.urls import path

from . import views

urlpatterns = [
    path('', views.booking_groups, name='booking-groups'),
    path('<str:group_id>/', views.booking_group_detail, name='booking-group-detail'),
    path('<str:group_id>/cancel/', views.cancel_booking_group, name='booking-group-cancel'),
]
