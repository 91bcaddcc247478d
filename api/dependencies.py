from typing import Optional

from fastapi import Header, HTTPException, Request, status

from database.db_manager import DatabaseManager
from models import User


def get_db(request: Request) -> DatabaseManager:
    """FastAPI dependency that provides the DatabaseManager."""
    return request.app.state.db_manager


def require_user(
    user_id: Optional[str] = Header(default=None, alias="x-user-id"),
    email: Optional[str] = Header(default=None, alias="x-user-email"),
) -> User:
    """FastAPI dependency: the caller as asserted by the auth gateway headers."""
    if not user_id or not user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="authentication required"
        )
    return User(id=user_id.strip(), email=email or "")
