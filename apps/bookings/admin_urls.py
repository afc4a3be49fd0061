from django.urls import path

from . import views_admin as views

# integer booking routes are matched before the group-id routes
urlpatterns = [
    path('bookings/', views.admin_booking_list, name='admin-bookings'),
    path('bookings/assign-rooms/', views.assign_rooms_to_bookings, name='admin-assign-rooms-to-bookings'),
    path('bookings/group/<str:group_id>/', views.delete_group, name='admin-delete-group'),

    path('bookings/<int:booking_id>/process/', views.process_booking, name='admin-process-booking'),
    path('bookings/<int:booking_id>/check-in/', views.check_in_booking, name='admin-check-in-booking'),
    path('bookings/<int:booking_id>/assign-room/', views.assign_room, name='admin-assign-room'),
    path('bookings/<int:booking_id>/check-out/', views.check_out_booking, name='admin-check-out-booking'),
    path('bookings/<int:booking_id>/cancel/', views.cancel_booking, name='admin-cancel-booking'),

    path('bookings/<str:group_id>/check-in-details/', views.check_in_details, name='admin-check-in-details'),
    path('bookings/<str:group_id>/room-assignments/', views.room_assignments, name='admin-room-assignments'),
    path('bookings/<str:group_id>/check-in-group/', views.check_in_group, name='admin-check-in-group'),
    path('bookings/<str:group_id>/assign-rooms/', views.assign_group_rooms, name='admin-assign-group-rooms'),
    path('bookings/<str:group_id>/process-payment/', views.process_payment, name='admin-process-payment'),
    path('bookings/<str:group_id>/payment/', views.update_group_payment, name='admin-group-payment'),
    path('bookings/<str:group_id>/check-out/', views.check_out_group, name='admin-check-out-group'),
]
