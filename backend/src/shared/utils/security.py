"""
Security Utilities

JWT token handling.

Tokens are issued by the identity service; this side only needs to verify
them and read the user id. Creation is kept for service-to-service calls
and tests.

Usage:
======
    from src.shared.utils.security import SecurityUtils

    # Create JWT
    token = SecurityUtils.create_access_token(
        data={"user_id": 17},
        secret_key=settings.SECRET_KEY,
        expires_delta=timedelta(hours=1)
    )

    # Decode JWT
    payload = SecurityUtils.decode_access_token(token, settings.SECRET_KEY)
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt


class SecurityUtils:
    """
    Security utilities for authentication.

    Provides:
    - JWT token creation and validation
    """

    @staticmethod
    def create_access_token(
        data: dict,
        secret_key: str,
        expires_delta: Optional[timedelta] = None,
        algorithm: str = "HS256",
    ) -> str:
        """
        Create JWT access token.

        Args:
            data: Payload data to encode (e.g., user_id)
            secret_key: Secret key for signing
            expires_delta: Token expiration time (default: 7 days)
            algorithm: JWT algorithm (default: HS256)

        Returns:
            Encoded JWT token string
        """
        to_encode = data.copy()

        if expires_delta:
            expire = datetime.now(timezone.utc) + expires_delta
        else:
            expire = datetime.now(timezone.utc) + timedelta(days=7)

        to_encode.update({
            "exp": expire,
            "iat": datetime.now(timezone.utc),
        })

        return jwt.encode(to_encode, secret_key, algorithm=algorithm)

    @staticmethod
    def decode_access_token(
        token: str,
        secret_key: str,
        algorithm: str = "HS256",
    ) -> dict:
        """
        Decode and verify JWT token.

        Args:
            token: JWT token string
            secret_key: Secret key used for signing
            algorithm: JWT algorithm (default: HS256)

        Returns:
            Decoded token payload

        Raises:
            ValueError: If token is expired or invalid

        Example:
            try:
                payload = SecurityUtils.decode_access_token(token, settings.SECRET_KEY)
                user_id = payload["user_id"]
            except ValueError as e:
                raise AuthenticationError(str(e))
        """
        try:
            return jwt.decode(
                token,
                secret_key,
                algorithms=[algorithm],
            )
        except jwt.ExpiredSignatureError:
            raise ValueError("Token has expired")
        except jwt.InvalidTokenError as e:
            raise ValueError(f"Invalid token: {str(e)}")
