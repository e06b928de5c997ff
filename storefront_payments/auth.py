import logging
from fastapi import Header
from jose import jwt, JWTError

from storefront_payments import config
from storefront_payments.errors import Unauthorized

logger = logging.getLogger(__name__)


def verify_token(authorization: str = Header(None)) -> str:
    """Authenticate the caller from a bearer token and return their user id."""
    if not authorization:
        logger.warning("Missing authorization header")
        raise Unauthorized()

    secret = config.jwt_secret()
    audience = config.jwt_audience()

    try:
        scheme, token = authorization.split()
        if scheme.lower() != "bearer":
            raise ValueError("unsupported scheme")
        claims = jwt.decode(
            token,
            secret,
            algorithms=["HS256"],
            audience=audience,
            options={"verify_aud": audience is not None},
        )
    except (ValueError, JWTError) as exc:
        logger.warning("Authentication failed: %s", exc)
        raise Unauthorized()

    user_id = claims.get("sub")
    if not user_id:
        logger.warning("Token carries no subject")
        raise Unauthorized()
    return user_id
