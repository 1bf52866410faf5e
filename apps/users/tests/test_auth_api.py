"""API tests for authentication and identity."""

from __future__ import annotations

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.identity import require_customer, require_vendor, resolve_actor
from apps.users.models import User
from shared.domain.exceptions import AuthorizationError, NotFoundError


class AuthAPITests(APITestCase):
    def setUp(self) -> None:
        self.vendor = User.objects.create_vendor(
            email="vendor@example.com", password="VendorPass123", business_name="Golden Hour Photo"
        )

    def test_token_obtain_and_profile(self) -> None:
        response = self.client.post(
            reverse("token-obtain"), {"email": "vendor@example.com", "password": "VendorPass123"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertIn("access", response.data)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
        me = self.client.get(reverse("user-me"))

        self.assertEqual(me.status_code, status.HTTP_200_OK, me.data)
        self.assertEqual(me.data["role"], "vendor")
        self.assertEqual(me.data["business_name"], "Golden Hour Photo")

    def test_wrong_password_is_rejected(self) -> None:
        response = self.client.post(
            reverse("token-obtain"), {"email": "vendor@example.com", "password": "wrong"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_role_cannot_be_changed_through_profile(self) -> None:
        self.client.force_authenticate(self.vendor)

        response = self.client.patch(reverse("user-me"), {"role": "customer", "first_name": "Ana"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.vendor.refresh_from_db()
        self.assertEqual(self.vendor.role, User.RoleChoices.VENDOR)
        self.assertEqual(self.vendor.first_name, "Ana")


class IdentityTests(TestCase):
    def test_resolve_actor(self) -> None:
        customer = User.objects.create_user(email="customer@example.com", password="CustomerPass123")

        self.assertEqual(resolve_actor(customer.pk), customer)
        self.assertEqual(require_customer(customer), customer)
        with self.assertRaises(AuthorizationError):
            require_vendor(customer)

    def test_unknown_or_inactive_actor_is_not_found(self) -> None:
        inactive = User.objects.create_user(email="gone@example.com", is_active=False)

        with self.assertRaises(NotFoundError):
            resolve_actor(inactive.pk)
        with self.assertRaises(NotFoundError):
            resolve_actor(999999)

    def test_display_name_prefers_business_name_for_vendors(self) -> None:
        vendor = User.objects.create_vendor(email="v@example.com", business_name="Studio Nine")
        customer = User.objects.create_user(email="c@example.com", first_name="Dana", last_name="Lee")
        anonymous = User.objects.create_user(email="anon@example.com")

        self.assertEqual(vendor.display_name, "Studio Nine")
        self.assertEqual(customer.display_name, "Dana Lee")
        self.assertEqual(anonymous.display_name, "anon@example.com")
