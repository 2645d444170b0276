"""
Account resolver.

Turns a bearer credential into a linked-account id. Invalid, expired or
missing tokens resolve to None so the request proceeds as an anonymous,
metered visitor.

Dependencies: python-jose
System role: Account lookup collaborator
"""

import logging

from jose import JWTError, jwt

logger = logging.getLogger(__name__)

ACCOUNT_CLAIMS = ("userId", "sub")


def parse_bearer(authorization: str | None) -> str | None:
    """
    Extract the token from an Authorization header value.

    Args:
        authorization: Raw header value

    Returns:
        str | None: Token for "Bearer <token>" headers, None otherwise
    """
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class JWTAccountResolver:
    """Resolve account ids from HMAC-signed JWTs."""

    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        """
        Initialize resolver.

        Args:
            secret: Signing secret shared with the sign-in service
            algorithm: JWT algorithm
        """
        self._secret = secret
        self._algorithm = algorithm

    def resolve(self, credential: str | None) -> str | None:
        """
        Verify the token and return the account id it carries.

        Args:
            credential: Bearer token (without the scheme)

        Returns:
            str | None: Account id from the userId or sub claim
        """
        if not credential:
            return None
        try:
            claims = jwt.decode(credential, self._secret, algorithms=[self._algorithm])
        except JWTError as e:
            logger.info(f"{__name__}:resolve - rejected bearer token: {type(e).__name__}")
            return None

        for claim in ACCOUNT_CLAIMS:
            value = claims.get(claim)
            if value:
                return str(value)
        return None
