"""
Shared route dependencies: credential resolution and upload reading.
"""
from fastapi import Depends, HTTPException, Request, UploadFile
from fastapi.routing import APIRoute
from starlette.routing import Match
from fastapi.security import HTTPBasic, HTTPBasicCredentials, HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Callable, Optional
from app.core.config import settings
from app.core.exceptions import BadRequest, Unauthorized
from app.db.session import get_db
from app.models.user import User
from app.services.token_service import TokenService
from app.services.user_service import UserService

bearer_scheme = HTTPBearer(auto_error=False)
basic_scheme = HTTPBasic(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the caller from a bearer token."""
    if credentials is None:
        raise Unauthorized("Missing bearer token")
    return TokenService(db).authenticate(credentials.credentials)


def get_basic_user(
    credentials: Optional[HTTPBasicCredentials] = Depends(basic_scheme),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the caller from basic auth (username:password)."""
    if credentials is None:
        raise Unauthorized("Missing credentials")
    return UserService(db).verify_credentials(credentials.username, credentials.password)


async def read_upload(file: UploadFile) -> bytes:
    """Read an uploaded file, enforcing the configured size limit."""
    content = await file.read(settings.MAX_UPLOAD_SIZE + 1)
    if not content:
        raise BadRequest("Empty file")
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise BadRequest(f"File exceeds {settings.MAX_UPLOAD_SIZE} bytes")
    return content


def route_auth_dependency(route) -> Optional[Callable]:
    """Return the credential dependency a route requires, if any."""
    if not isinstance(route, APIRoute):
        return None

    def _walk(dependant):
        for dependency in dependant.dependencies:
            if dependency.call in (get_current_user, get_basic_user):
                return dependency.call
            found = _walk(dependency)
            if found:
                return found
        return None

    return _walk(route.dependant)


async def reject_unauthenticated(request: Request) -> bool:
    """
    Check the credentials of a request whose parameters failed validation.

    Returns True when the matched route is protected and the request does not
    authenticate, so the caller answers 401 instead of reporting the body.
    """
    route = request.scope.get("route")
    if route is None:
        for candidate in request.app.router.routes:
            match, _ = candidate.matches(request.scope)
            if match == Match.FULL:
                route = candidate
                break
    auth_dependency = route_auth_dependency(route)
    if auth_dependency is None:
        return False

    db_factory = request.app.dependency_overrides.get(get_db, get_db)
    sessions = db_factory()
    db = next(sessions)
    try:
        if auth_dependency is get_current_user:
            get_current_user(await bearer_scheme(request), db)
        else:
            get_basic_user(await basic_scheme(request), db)
    except (Unauthorized, HTTPException):
        return True
    finally:
        sessions.close()
    return False
