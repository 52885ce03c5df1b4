import logging
from typing import Annotated

from fastapi import Depends, Request
from sqlmodel import Session, select

from core.exceptions import AuthenticationError, AuthorizationError, NotFoundError
from core.firebase import verify_id_token
from db.session import get_session
from models.user import User, UserRole

logger = logging.getLogger(__name__)

CREDENTIALS_MESSAGE = "Could not validate credentials"


def get_token_claims(request: Request) -> dict:
    # 1) Extract & Analyze Authorization Header
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        raise AuthenticationError(CREDENTIALS_MESSAGE)
    token = auth_header.split(" ", 1)[1]

    # 2) Verify This Points to a Real Identity Provider Account
    try:
        decoded = verify_id_token(token)
    except Exception:
        # firebase_admin raises several unrelated error types for bad tokens
        logger.info("Rejected bearer token", exc_info=True)
        raise AuthenticationError(CREDENTIALS_MESSAGE)
    if not decoded.get("uid"):
        raise AuthenticationError(CREDENTIALS_MESSAGE)
    return decoded


def resolve_user(claims: dict, session: Session) -> User:
    """
    Map verified identity claims onto the User row.

    Users are created out-of-band, so an unknown identity is a 404. A row
    found only by email gets linked to the provider uid on first login; a row
    already linked to another uid is never handed to a different account.
    """
    uid = claims["uid"]
    user = session.exec(select(User).where(User.auth_uid == uid)).first()

    if user is None:
        email = claims.get("email")
        if email:
            user = session.exec(select(User).where(User.email == email)).first()
        if user is None:
            raise NotFoundError("User profile not found. Please contact your administrator.")
        if user.auth_uid is not None:
            logger.warning(
                "Identity %s presented the email of user %s, which is linked to another identity",
                uid,
                user.id,
            )
            raise AuthenticationError(
                "This email is already linked to a different sign-in account."
            )
        user.auth_uid = uid
        session.add(user)
        session.commit()
        session.refresh(user)
        logger.info("Linked identity %s to user %s", uid, user.id)

    if not user.active:
        raise AuthorizationError("User account is inactive.")
    return user


async def get_current_user(
    request: Request,
    session: Annotated[Session, Depends(get_session)],
) -> User:
    claims = get_token_claims(request)
    return resolve_user(claims, session)


# Manager Role Check Dependency
async def require_manager_role(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    if not current_user.is_manager:
        raise AuthorizationError("Access denied. Manager or admin role required.")
    return current_user


# Admin Role Check Dependency
async def require_admin_role(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    if current_user.role != UserRole.ADMIN:
        raise AuthorizationError("Access denied. Admin role required.")
    return current_user
