from django.contrib import admin
from .models import Room, RoomType


class RoomInline(admin.TabularInline):
    model = Room
    extra = 0
    fields = ['name', 'description', 'is_available']


@admin.register(RoomType)
class RoomTypeAdmin(admin.ModelAdmin):
    list_display = ['name', 'price', 'room_count', 'available_count']
    search_fields = ['name']
    inlines = [RoomInline]

    def room_count(self, obj):
        return obj.rooms.count()
    room_count.short_description = 'Rooms'

    def available_count(self, obj):
        return obj.rooms.filter(is_available=True).count()
    available_count.short_description = 'Available'


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ['name', 'room_type', 'is_available']
    list_filter = ['room_type', 'is_available']
    search_fields = ['name']

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('room_type')
