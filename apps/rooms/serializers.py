from rest_framework import serializers
from .models import Room, RoomType


class RoomTypeSerializer(serializers.ModelSerializer):
    total_rooms = serializers.SerializerMethodField()
    available_rooms = serializers.SerializerMethodField()

    class Meta:
        model = RoomType
        fields = ['id', 'name', 'description', 'price', 'total_rooms', 'available_rooms']

    def get_total_rooms(self, obj):
        return obj.rooms.count()

    def get_available_rooms(self, obj):
        return obj.rooms.filter(is_available=True).count()


class RoomSerializer(serializers.ModelSerializer):
    room_type_name = serializers.ReadOnlyField(source='room_type.name')
    price = serializers.DecimalField(source='room_type.price', max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = Room
        fields = ['id', 'name', 'room_type', 'room_type_name', 'description', 'price', 'is_available']
        # availability only changes through check-in and release
        read_only_fields = ['is_available']

    def validate_room_type(self, value):
        if self.instance and self.instance.room_type_id != value.pk and not self.instance.is_available:
            raise serializers.ValidationError("Cannot change the type of an occupied room.")
        return value


class AvailableRoomsQuerySerializer(serializers.Serializer):
    room_type_id = serializers.PrimaryKeyRelatedField(queryset=RoomType.objects.all())
