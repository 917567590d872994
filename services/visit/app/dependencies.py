from typing import Annotated
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError

from app.config import settings
from common.storage import VisitStore
from common.utils.security import decode_access_token, user_id_from_claims

security = HTTPBearer()


async def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)]
) -> str:
    """Validate the bearer token and return the opaque user id it carries."""
    try:
        claims = decode_access_token(
            credentials.credentials, settings.JWT_SECRET, settings.JWT_ALGORITHM
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = user_id_from_claims(claims)
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has no user id",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_id


def get_store(request: Request) -> VisitStore:
    """Visit store created at startup."""
    return request.app.state.store


CurrentUser = Annotated[str, Depends(get_current_user_id)]
Store = Annotated[VisitStore, Depends(get_store)]
