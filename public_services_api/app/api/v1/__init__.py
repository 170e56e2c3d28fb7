"""
Version 1 of the API.

Routers live in ``endpoints`` and are combined in ``router.py``.  The
whole version is mounted under ``settings.api_prefix``.
"""
