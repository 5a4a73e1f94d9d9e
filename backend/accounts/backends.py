"""
Custom authentication backend for email login.

Users authenticate with ``email`` + ``password``.  The lookup is
case-insensitive; ``username`` is still accepted so that the Django
admin login form keeps working.

This backend is registered in ``settings.AUTHENTICATION_BACKENDS``
so that Django's ``authenticate()`` call dispatches to it.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend
from django.db.models import Q

User = get_user_model()


class EmailAuthBackend(ModelBackend):
    """
    Authenticate against ``email`` (or ``username`` as a fallback).

    ``django.contrib.auth.authenticate(email=..., password=...)`` and the
    admin's ``authenticate(username=..., password=...)`` both resolve here.
    """

    def authenticate(self, request, email=None, password=None, username=None, **kwargs):
        """
        Resolve the user by *email* and verify *password*.

        Parameters
        ----------
        request : HttpRequest | None
        email : str
            The address supplied in the login form.
        password : str
            The raw password to verify.
        username : str, optional
            Accepted in place of ``email`` (admin login form).

        Returns
        -------
        User | None
            The authenticated user, or ``None`` on failure.
        """
        identifier = email or username
        if identifier is None or password is None:
            return None

        try:
            user = User.objects.get(
                Q(email__iexact=identifier) | Q(username=identifier)
            )
        except User.DoesNotExist:
            # Run the default password hasher to mitigate timing attacks
            User().set_password(password)
            return None
        except User.MultipleObjectsReturned:
            return None

        if user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None
