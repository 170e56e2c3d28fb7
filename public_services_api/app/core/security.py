"""
Security helpers: bearer tokens, password hashing and identity resolution.

Tokens are JSON Web Tokens signed with HMAC-SHA256 and base64url
encoding.  Passwords are hashed with PBKDF2-HMAC-SHA256 and a random
salt.

``IdentityGateway`` plays the role of the external identity provider:
it registers credentials, authenticates them into a bearer token and
answers "who is this token for?".  Credentials live in the key-value
store under ``credential:<email>``.  Endpoints never read identity
from global state; they receive an ``Identity`` through the FastAPI
dependencies at the bottom of this module and pass it explicitly into
the services.  A deployment backed by a real identity provider only
needs to override ``get_identity_gateway``.
"""

import base64
import hashlib
import hmac
import json
import logging
import os
import time
from dataclasses import dataclass
from typing import Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import settings
from .exceptions import UnauthorizedError, ValidationError
from .ids import generate_id
from .kv_store import KVStore, get_kv_store


logger = logging.getLogger(__name__)

PBKDF2_ITERATIONS = 100_000


def _b64_url_encode(data: bytes) -> str:
    """Base64-url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64-url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    """Compute HMAC-SHA256 signature of a message using the given secret."""
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def create_access_token(data: Dict[str, str], expires_delta: Optional[int] = None) -> str:
    """Create a signed JWT token with the given payload.

    The payload is extended with an ``exp`` field holding the
    expiration time as a UNIX timestamp.  Clients send the token in the
    ``Authorization`` header as ``Bearer <token>``.

    Parameters
    ----------
    data : dict
        Claims to embed in the token (e.g. {"sub": "<user id>"}).
    expires_delta : Optional[int]
        Lifetime of the token in seconds.  Defaults to
        ``settings.access_token_expire_minutes * 60``.
    """
    to_encode = dict(data)
    exp_seconds = expires_delta or settings.access_token_expire_minutes * 60
    to_encode["exp"] = int(time.time()) + exp_seconds
    header = {"alg": "HS256", "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(to_encode, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, settings.secret_key))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str) -> Optional[Dict[str, str]]:
    """Verify and decode a JWT token.

    Returns the payload dictionary when the signature matches and the
    token has not expired, otherwise ``None``.
    """
    parts = token.split(".")
    if len(parts) != 3:
        return None
    header_b64, payload_b64, signature_b64 = parts
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    try:
        actual_sig = _b64_url_decode(signature_b64)
        expected_sig = _sign(signing_input, settings.secret_key)
        # Constant-time comparison
        if not hmac.compare_digest(expected_sig, actual_sig):
            return None
        data = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
    except (ValueError, UnicodeDecodeError):
        return None
    if not isinstance(data, dict):
        return None
    if data.get("exp") is None or int(data["exp"]) < int(time.time()):
        return None
    return data


def hash_password(password: str) -> str:
    """Hash a password using PBKDF2-HMAC with SHA-256.

    Returns the salt and hash in hex separated by ``$``.
    """
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a stored salt+hash string."""
    try:
        salt_hex, hash_hex = hashed_password.split("$", 1)
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return hmac.compare_digest(dk, stored_hash)


@dataclass(frozen=True)
class Identity:
    """Resolved caller of a request."""

    user_id: str
    email: str
    name: str = ""
    account_type: str = "client"


class IdentityGateway:
    """Local stand-in for the external identity provider."""

    prefix = "credential"

    def __init__(self, store: KVStore) -> None:
        self.store = store

    def _key(self, email: str) -> str:
        return f"{self.prefix}:{email.strip().lower()}"

    def register(self, email: str, password: str, name: str, account_type: str) -> Identity:
        """Create credentials for a new user and return their identity."""
        key = self._key(email)
        if self.store.get(key) is not None:
            raise ValidationError("A user with this email address has already been registered")
        identity = Identity(
            user_id=generate_id(),
            email=email.strip().lower(),
            name=name,
            account_type=account_type,
        )
        self.store.set(
            key,
            {
                "userId": identity.user_id,
                "email": identity.email,
                "name": name,
                "accountType": account_type,
                "passwordHash": hash_password(password),
            },
        )
        logger.info("Registered identity %s (%s)", identity.user_id, account_type)
        return identity

    def authenticate(self, email: str, password: str) -> str:
        """Exchange credentials for a bearer token."""
        record = self.store.get(self._key(email))
        if not record or not verify_password(password, record.get("passwordHash", "")):
            raise UnauthorizedError("Invalid login credentials")
        return create_access_token({"sub": record["userId"], "email": record["email"]})

    def resolve(self, token: Optional[str]) -> Optional[Identity]:
        """Return the identity a token belongs to, or ``None``."""
        if not token:
            return None
        payload = decode_access_token(token)
        if not payload or not payload.get("email"):
            return None
        record = self.store.get(self._key(payload["email"]))
        # Credentials removed or re-issued to another user id.
        if not record or record.get("userId") != payload.get("sub"):
            return None
        return Identity(
            user_id=record["userId"],
            email=record["email"],
            name=record.get("name", ""),
            account_type=record.get("accountType", "client"),
        )


security = HTTPBearer(auto_error=False)


def get_identity_gateway() -> IdentityGateway:
    return IdentityGateway(get_kv_store())


def get_optional_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    gateway: IdentityGateway = Depends(get_identity_gateway),
) -> Optional[Identity]:
    """Dependency resolving the bearer token, ``None`` when absent or invalid."""
    if credentials is None:
        return None
    return gateway.resolve(credentials.credentials)


def get_current_identity(
    identity: Optional[Identity] = Depends(get_optional_identity),
) -> Identity:
    """Dependency that requires an authenticated caller.

    Raises ``UnauthorizedError`` (HTTP 401) when the request carries no
    valid bearer token.
    """
    if identity is None:
        raise UnauthorizedError()
    return identity


def require_identity(identity: Optional[Identity]) -> Identity:
    """Service-side guard for operations that must know their caller."""
    if identity is None:
        raise UnauthorizedError()
    return identity
