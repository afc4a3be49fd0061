from dataclasses import dataclass

from apps.core.exceptions import AuthorizationError


@dataclass(frozen=True)
class Actor:
    """
    The verified identity an engine operation runs on behalf of.

    Built once per request from the authenticated user; operations call
    ``require_admin`` instead of inspecting the request themselves.
    """
    id: int
    role: str
    email: str = ''

    @classmethod
    def from_user(cls, user):
        return cls(id=user.pk, role=getattr(user, 'role', 'guest'), email=getattr(user, 'email', ''))

    @property
    def is_admin(self):
        return self.role == 'admin'

    def require_admin(self):
        if not self.is_admin:
            raise AuthorizationError()

    def require_owner(self, user_id):
        """Guests may only touch their own bookings; admins may touch any."""
        if not self.is_admin and user_id != self.id:
            raise AuthorizationError('Unauthorized. This booking belongs to another guest.')
