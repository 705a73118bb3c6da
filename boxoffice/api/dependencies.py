from fastapi import Depends, Header

from boxoffice.domain.auth import AuthContext, Role
from boxoffice.domain.exceptions import AuthenticationError, ForbiddenError
from boxoffice.infrastructure.db.session import SessionLocal


def get_db():
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_auth_context(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> AuthContext:
    """
    Identity gate. The session layer in front of this service
    authenticates the caller and forwards who they are in the
    X-User-Id and X-User-Role headers.
    """
    if not x_user_id or not x_user_id.strip():
        raise AuthenticationError("Unauthorized: Please log in.")
    try:
        role = Role(x_user_role)
    except ValueError as exc:
        raise AuthenticationError("Unauthorized: Unknown role.") from exc

    return AuthContext(user_id=x_user_id.strip(), role=role)


def require_organizer(
    auth: AuthContext = Depends(get_auth_context),
) -> AuthContext:
    if not auth.is_organizer:
        raise ForbiddenError("Forbidden: Insufficient permissions.")
    return auth
