"""
Top-level package for the Public Services Booking API.

All functionality lives in submodules under ``app``; import the ASGI
application as ``public_services_api.app.main:app``.
"""

__all__ = []
