"""Shared API dependencies for authentication and service wiring."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from comic_cms.core.security import decode_access_token
from comic_cms.db.gateway import DataStore
from comic_cms.db.session import get_db
from comic_cms.models import User
from comic_cms.services.queue_tasks import QueueRecalculationDispatcher

# HTTP Bearer scheme for JWT authentication; optional routes accept anonymous calls.
bearer_scheme = HTTPBearer()
optional_bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_store(db: SessionDep) -> DataStore:
    """Wrap the request session in a data store gateway."""
    return DataStore(db)


StoreDep = Annotated[DataStore, Depends(get_store)]


def _user_from_token(token: str, db: Session) -> User:
    try:
        user_id = decode_access_token(token)
    except JWTError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from err
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )

    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> User:
    """Get the current authenticated user from the bearer token.

    Raises:
        HTTPException: If the token is invalid or the user does not exist.
    """
    return _user_from_token(credentials.credentials, db)


def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(optional_bearer_scheme)],
    db: SessionDep,
) -> User | None:
    """Like ``get_current_user`` but returns None when no token is sent."""
    if credentials is None:
        return None
    return _user_from_token(credentials.credentials, db)


def get_mod_user(user: Annotated[User, Depends(get_current_user)]) -> User:
    """Require a moderator or admin."""
    if not user.is_mod:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Moderator access required",
        )
    return user


def get_client_ip(request: Request) -> str | None:
    """Best-effort client address, honouring a proxy's forwarded header."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def get_queue_dispatcher() -> QueueRecalculationDispatcher:
    return QueueRecalculationDispatcher()


# Type aliases for user and service dependencies
CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]
ModUserDep = Annotated[User, Depends(get_mod_user)]
ClientIpDep = Annotated[str | None, Depends(get_client_ip)]
QueueDispatcherDep = Annotated[QueueRecalculationDispatcher, Depends(get_queue_dispatcher)]
