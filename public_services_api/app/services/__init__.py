"""
Service layer abstraction.

Each service encapsulates business logic for a domain on top of the
repositories in ``repositories``.  Services receive the resolved
caller (``Identity``) as an explicit argument; none of them read
request state.
"""
