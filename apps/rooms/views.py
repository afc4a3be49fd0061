from rest_framework import viewsets
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from apps.core.exceptions import ValidationFailed
from apps.core.responses import created, envelope
from apps.users.permissions import IsAdminOnly, IsAdminOrReadOnly
from .models import RoomType
from .serializers import AvailableRoomsQuerySerializer, RoomSerializer, RoomTypeSerializer
from . import services


class EnvelopeModelViewSet(viewsets.ModelViewSet):
    """ModelViewSet whose responses use the {status, message, data} envelope"""
    label = 'Record'

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        serializer = self.get_serializer(queryset, many=True)
        return envelope(f'{self.label}s fetched successfully', serializer.data)

    def retrieve(self, request, *args, **kwargs):
        return envelope(f'{self.label} fetched successfully', self.get_serializer(self.get_object()).data)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return created(f'{self.label} created successfully', serializer.data)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = self.get_serializer(self.get_object(), data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return envelope(f'{self.label} updated successfully', serializer.data)


class RoomTypeViewSet(EnvelopeModelViewSet):
    queryset = RoomType.objects.prefetch_related('rooms').all()
    serializer_class = RoomTypeSerializer
    permission_classes = [IsAdminOrReadOnly]
    label = 'Room type'

    def destroy(self, request, *args, **kwargs):
        services.delete_room_type(self.get_object())
        return envelope('Room type deleted successfully')


class RoomViewSet(EnvelopeModelViewSet):
    serializer_class = RoomSerializer
    permission_classes = [IsAdminOrReadOnly]
    label = 'Room'

    def get_queryset(self):
        room_type_id = self.request.query_params.get('room_type_id')
        if room_type_id and not room_type_id.isdigit():
            raise ValidationFailed('room_type_id must be an integer')
        available = self.request.query_params.get('available', '').lower() in ('1', 'true', 'yes')
        return services.list_rooms(room_type_id=room_type_id, available=available)

    def destroy(self, request, *args, **kwargs):
        services.delete_room(self.get_object())
        return envelope('Room deleted successfully')


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminOnly])
def available_rooms(request):
    """
    GET /api/admin/rooms/available/?room_type_id=<id>
    Rooms of one type that can be assigned right now
    """
    query = AvailableRoomsQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)
    room_type = query.validated_data['room_type_id']
    rooms = services.available_rooms(room_type.pk).select_related('room_type')
    return envelope('Available rooms fetched successfully', RoomSerializer(rooms, many=True).data)
