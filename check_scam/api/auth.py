from datetime import datetime, timedelta, timezone

import jwt
from fastapi import HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from fastapi.security.api_key import APIKeyHeader
from jwt import PyJWTError

from check_scam.config import settings

API_KEY_NAME = "X-API-Key"
api_key_header = APIKeyHeader(name=API_KEY_NAME, auto_error=False)
bearer_scheme = HTTPBearer(auto_error=False)


def _create_token() -> str:
    expires = datetime.now(timezone.utc) + timedelta(hours=settings.token_ttl_hours)
    payload = {
        "sub": "moderator",
        "exp": expires,
        "aud": settings.token_audience,
        "iss": settings.token_issuer,
    }
    return jwt.encode(payload, settings.secret_key, algorithm="HS256")


async def login(api_key: str = Security(api_key_header)) -> dict:
    if not settings.api_key or api_key != settings.api_key:
        raise HTTPException(status_code=403, detail="Forbidden")
    return {"access_token": _create_token()}


async def get_token(
    credentials: HTTPAuthorizationCredentials = Security(bearer_scheme),
) -> str:
    if credentials is None:
        raise HTTPException(status_code=403, detail="Forbidden")
    # older keys stay valid until their tokens expire
    for key in settings.secret_keys:
        try:
            jwt.decode(
                credentials.credentials,
                key,
                algorithms=["HS256"],
                audience=settings.token_audience,
                issuer=settings.token_issuer,
                options={"verify_exp": True},
            )
        except PyJWTError:
            continue
        return credentials.credentials
    raise HTTPException(status_code=403, detail="Invalid token")
