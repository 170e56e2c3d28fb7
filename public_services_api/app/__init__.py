"""
Application package initializer.

The project is organised into layers: ``core`` holds configuration,
logging, the key-value store and identity handling; ``schemas`` the
record types; ``services`` the business logic; and ``api`` the
versioned HTTP routes.  Each domain (services, appointments, reviews,
favorites, notifications, analytics) has a router in
``api/v1/endpoints`` and a service class in ``services``.
"""

from .main import app  # noqa: F401
