from pydantic import BaseModel
from typing import Optional, Union


class CurrentUserResponse(BaseModel):
    id: Union[int, str]
    email: Optional[str] = None
    username: Optional[str] = None
    name: Optional[str] = None
    is_super_user: bool = False
