"""
Security utilities for the authentication boundary.

This provides:
1. Verification of bearer tokens issued by the external identity provider
2. Extraction of the caller identity from verified claims
3. Token creation for local development and tests
4. The FastAPI dependency resolving the current caller
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from acwhisk.config import settings
from acwhisk.core.exceptions import AuthenticationError

# Missing credentials are reported through AuthenticationError, not FastAPI's 403
security = HTTPBearer(auto_error=False)


class SecurityManager:
    """
    Token verification against the identity provider's shared secret.

    Tokens carry the user id in ``sub`` and display details under
    ``user_metadata``; the audience must match ``jwt_audience``.
    """

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        audience: Optional[str] = None,
    ):
        self.secret_key = secret_key or settings.jwt_secret
        self.algorithm = algorithm or settings.jwt_algorithm
        self.audience = audience or settings.jwt_audience

    def create_access_token(
        self,
        user_id: str,
        email: str = "",
        name: Optional[str] = None,
        role: Optional[str] = None,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        """
        Create a token shaped like the identity provider's.

        Args:
            user_id: Subject of the token
            email: Caller email
            name: Display name placed in user_metadata
            role: Role placed in user_metadata
            expires_delta: Optional custom lifetime (default one hour)

        Returns:
            Encoded JWT token string
        """
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta or timedelta(hours=1))

        metadata = {}
        if name is not None:
            metadata["name"] = name
        if role is not None:
            metadata["role"] = role

        claims = {
            "sub": user_id,
            "email": email,
            "aud": self.audience,
            "user_metadata": metadata,
            "iat": now,
            "exp": expire,
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> Dict[str, Any]:
        """
        Decode and validate a JWT token.

        Raises:
            AuthenticationError: If token is invalid, expired or for another audience
        """
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                audience=self.audience,
            )
        except JWTError as e:
            raise AuthenticationError(f"Could not validate token: {str(e)}")

    def extract_user_from_token(self, token: str) -> Dict[str, Any]:
        """
        Extract the caller identity from a JWT token.

        Returns:
            Dict with ``user_id``, ``email``, ``name`` and ``role``

        Raises:
            AuthenticationError: If token is invalid or has no subject
        """
        payload = self.decode_token(token)

        user_id = payload.get("sub")
        if not user_id or not isinstance(user_id, str):
            raise AuthenticationError("Token does not contain valid user information")

        metadata = payload.get("user_metadata")
        if not isinstance(metadata, dict):
            metadata = {}

        return {
            "user_id": user_id,
            "email": payload.get("email") or "",
            "name": metadata.get("name"),
            "role": metadata.get("role"),
        }


# Global security manager instance
security_manager = SecurityManager()


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Dict[str, Any]:
    """
    FastAPI dependency resolving the authenticated caller.

    Raises:
        AuthenticationError: Missing or invalid bearer token
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Missing bearer token")
    return security_manager.extract_user_from_token(credentials.credentials)
