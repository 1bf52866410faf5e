"""User API views."""

from __future__ import annotations

from rest_framework import generics, permissions  # type: ignore

from .serializers import UserSerializer


class MeView(generics.RetrieveUpdateAPIView):
    """Profile of the current user; role and e-mail are read-only."""

    serializer_class = UserSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_object(self):  # type: ignore
        return self.request.user
