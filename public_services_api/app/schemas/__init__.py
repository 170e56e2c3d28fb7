"""
Pydantic schema definitions for stored records and API payloads.

Each entity (users, services, appointments, etc.) defines its own
module with a record model (what lives in the key-value store) and
the request bodies used to create or change it.  Records use
snake_case attributes in Python and camelCase keys in JSON, both in
API responses and in the store.
"""
