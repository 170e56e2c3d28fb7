"""
API package containing versioned routes.

Each version lives in its own subpackage (``v1``) exposing a
top-level ``router`` that includes the domain routers.  The prefix
under which a version is mounted comes from ``settings.api_prefix``.
"""
