"""Bearer token handling. Tokens are issued by the auth service; this service only reads them."""
from datetime import datetime, timedelta, timezone
import jwt
from pydantic import ValidationError
from app.config import get_settings
from app.schemas.auth import TokenClaims


def create_access_token(user_id: int, expires_minutes: int = 60) -> str:
    """Token in the auth service's format. Used by scripts/create_dev_token.py and tests."""
    settings = get_settings()
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    payload = {"UserId": user_id, "exp": expire}
    raw = jwt.encode(
        payload,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return raw if isinstance(raw, str) else raw.decode("utf-8")


def decode_token_with_error(token: str) -> tuple[TokenClaims | None, str | None]:
    """Decode and validate a JWT; returns (claims, error_message)."""
    if not token or not isinstance(token, str):
        return None, "empty token"
    settings = get_settings()
    token = token.strip()
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except jwt.ExpiredSignatureError as e:
        return None, str(e)
    except jwt.PyJWTError as e:
        return None, str(e)
    try:
        return TokenClaims.model_validate(payload), None
    except ValidationError:
        return None, "invalid token claim"
