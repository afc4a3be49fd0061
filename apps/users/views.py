from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
import logging

from apps.core.responses import created, envelope
from .serializers import CustomTokenObtainPairSerializer, RegisterSerializer, UserSerializer

logger = logging.getLogger(__name__)


class CustomTokenObtainPairView(TokenObtainPairView):
    serializer_class = CustomTokenObtainPairSerializer
    permission_classes = [AllowAny]
    authentication_classes = []


class RegisterView(APIView):
    """Register a guest account and hand back a token pair"""
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        refresh = CustomTokenObtainPairSerializer.get_token(user)

        logger.info(f"Registered guest account {user.email}")
        return created('User registered successfully', {
            'user': UserSerializer(user).data,
            'access': str(refresh.access_token),
            'refresh': str(refresh),
        })


class ProfileView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return envelope('Profile fetched successfully', UserSerializer(request.user).data)


class LogoutView(APIView):
    """Handle user logout by blacklisting refresh token"""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        refresh_token = request.data.get("refresh")
        if not refresh_token:
            return envelope("Refresh token required.", status='error', http_code=400)
        try:
            RefreshToken(refresh_token).blacklist()
        except TokenError:
            return envelope("Invalid token or already logged out", status='error', http_code=400)
        return envelope("Logout successful")
