# apps/users/authentication.py
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken
import logging

logger = logging.getLogger(__name__)


class CustomJWTAuthentication(JWTAuthentication):
    """
    Bearer JWT authentication that rejects disabled accounts and keeps the
    role claim on the user object.
    """

    def get_user(self, validated_token):
        user = super().get_user(validated_token)

        if not user.is_active:
            logger.warning(f"Inactive user attempted authentication: {user.email}")
            raise InvalidToken("User account is disabled")

        # The database role wins over a stale claim
        token_role = validated_token.get("role")
        if token_role and token_role != user.role:
            logger.info(f"Role claim for {user.email} is stale ({token_role} -> {user.role})")

        logger.debug(f"Authenticated {user.email} (role: {user.role})")
        return user
