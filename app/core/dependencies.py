"""
Core dependencies for route protection and permission checking
"""

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.config import settings
from app.database.supabase_client import get_supabase
from app.modules.auth.service import AuthService
from app.modules.permissions.schemas import Action
from app.modules.permissions.resolver import PermissionResolver, PermissionSession
from app.modules.permissions.service import PermissionService
from app.modules.permissions.store import SupabasePermissionStore
from app.modules.users.service import UserDirectory
from supabase import Client
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_user_directory(supabase: Client = Depends(get_supabase)) -> UserDirectory:
    return UserDirectory(supabase, settings.users_table)


def get_permission_store(supabase: Client = Depends(get_supabase)) -> SupabasePermissionStore:
    return SupabasePermissionStore(supabase, settings.permissions_table)


def get_permission_resolver(store: SupabasePermissionStore = Depends(get_permission_store)) -> PermissionResolver:
    return PermissionResolver(store)


def get_permission_service(
    store: SupabasePermissionStore = Depends(get_permission_store),
    resolver: PermissionResolver = Depends(get_permission_resolver)
) -> PermissionService:
    return PermissionService(store, resolver)


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    token = credentials.credentials
    return auth_service.get_current_user(token)


def get_permission_session(
    request: Request,
    user_data: dict = Depends(get_current_user_id),
    resolver: PermissionResolver = Depends(get_permission_resolver)
) -> PermissionSession:
    """Request-scoped permission session for the acting user; one batch lookup per request"""
    session = getattr(request.state, "permission_session", None)
    if session is None:
        session = PermissionSession(resolver)
        request.state.permission_session = session
    return session.bind(user_data["id"])


def require_super_user(
    user_data: dict = Depends(get_current_user_id),
    directory: UserDirectory = Depends(get_user_directory)
) -> dict:
    """Permission screens are for super users only"""
    if not directory.is_super_user(user_data):
        logger.info(f"User {user_data.get('id')} denied access to permission management")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only super users can manage permissions"
        )
    return user_data


def require_page_action(page: str, action: Action = Action.VIEW):
    """Factory function to create a page/action guard dependency for record screens"""
    def check_page_action(
        user_data: dict = Depends(get_current_user_id),
        session: PermissionSession = Depends(get_permission_session),
        directory: UserDirectory = Depends(get_user_directory)
    ) -> dict:
        if directory.is_super_user(user_data):
            return user_data
        if not session.get(page).allows(action):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required: {page}:{action.value}"
            )
        return user_data
    return check_page_action
