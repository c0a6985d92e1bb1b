from pydantic import BaseModel
from typing import Optional, Union
from datetime import datetime


class UserResponse(BaseModel):
    id: Union[int, str]
    username: str
    name: str
    is_super_user: bool = False
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
