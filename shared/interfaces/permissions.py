"""
Permission helpers shared by module views.
"""
from rest_framework.permissions import AllowAny, IsAdminUser


class AdminWriteMixin:
    """Reads are public, writes need a staff user."""

    def get_permissions(self):
        if self.request.method == 'GET':
            return [AllowAny()]
        return [IsAdminUser()]
