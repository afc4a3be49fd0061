# apps/payments/views.py
from rest_framework import generics
from rest_framework.permissions import IsAuthenticated
from django_filters.rest_framework import DjangoFilterBackend

from apps.core.responses import envelope
from apps.users.permissions import IsAdminOnly
from .models import Payment
from .serializers import PaymentSerializer


class PaymentListView(generics.ListAPIView):
    """
    GET /api/admin/payments/?booking_group_id=<id>
    Audit trail of recorded payments - Admin only
    """
    serializer_class = PaymentSerializer
    permission_classes = [IsAuthenticated, IsAdminOnly]
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ['booking_group_id', 'booking', 'currency', 'payment_method']

    def get_queryset(self):
        return Payment.objects.select_related('processed_by')

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        return envelope('Payments fetched successfully', self.get_serializer(queryset, many=True).data)
