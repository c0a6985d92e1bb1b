import logging
from supabase import Client
from app.modules.users.schemas import UserResponse
from typing import Any, Dict, List, Optional, Union
from fastapi import HTTPException

logger = logging.getLogger(__name__)

USER_COLUMNS = "id, username, name, is_super_user, is_active, created_at, updated_at"


class UserDirectory:
    """Who the acting and target users are, and whether they are super users."""

    def __init__(self, supabase: Client, table: str):
        self.supabase = supabase
        self.table = table

    def find_user(self, user_id: Union[int, str]) -> Optional[UserResponse]:
        """Directory row by ID, or None"""
        try:
            result = self.supabase.table(self.table)\
                .select(USER_COLUMNS)\
                .eq("id", user_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error getting user {user_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            return None
        return UserResponse(**result.data[0])

    def get_user(self, user_id: Union[int, str]) -> UserResponse:
        user = self.find_user(user_id)
        if user is None:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    def list_users(self, include_super_users: bool = False) -> List[UserResponse]:
        """Active users ordered by name; super users are left out unless asked for"""
        try:
            query = self.supabase.table(self.table)\
                .select(USER_COLUMNS)\
                .eq("is_active", True)
            if not include_super_users:
                query = query.eq("is_super_user", False)
            result = query.order("name").execute()
            return [UserResponse(**user) for user in result.data or []]
        except Exception as e:
            logger.error(f"Error listing users: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def is_super_user(self, user_data: Dict[str, Any]) -> bool:
        """Super user by Supabase Auth app_metadata, or by the directory row flag"""
        app_metadata = user_data.get("app_metadata") or {}
        if app_metadata.get("type") == "super_user":
            return True
        try:
            user = self.find_user(user_data["id"])
        except HTTPException:
            return False
        return bool(user and user.is_active and user.is_super_user)
