from enum import Enum
from pydantic import BaseModel
from typing import Dict, List, Optional, Union

UserId = Union[int, str]

FLAG_FIELDS = ("can_view", "can_create", "can_update", "can_delete")


class Action(str, Enum):
    VIEW = "can_view"
    CREATE = "can_create"
    UPDATE = "can_update"
    DELETE = "can_delete"


class PermissionFlags(BaseModel):
    can_view: bool = True
    can_create: bool = True
    can_update: bool = True
    can_delete: bool = True

    def allows(self, action: Action) -> bool:
        return getattr(self, action.value)


class PermissionRecord(PermissionFlags):
    user_id: Optional[UserId] = None
    page: str
    is_active: bool = True

    @classmethod
    def allow_all(cls, user_id: Optional[UserId], page: str) -> "PermissionRecord":
        """Default-allow record returned when no explicit grant applies."""
        return cls(user_id=user_id, page=page)

    @classmethod
    def from_row(cls, row: dict) -> "PermissionRecord":
        return cls(
            user_id=row.get("user_id"),
            page=row["page"],
            can_view=bool(row.get("can_view")),
            can_create=bool(row.get("can_create")),
            can_update=bool(row.get("can_update")),
            can_delete=bool(row.get("can_delete")),
            is_active=bool(row.get("is_active", True)),
        )

    def to_row(self) -> dict:
        return {
            "user_id": self.user_id,
            "page": self.page,
            "can_view": self.can_view,
            "can_create": self.can_create,
            "can_update": self.can_update,
            "can_delete": self.can_delete,
            "is_active": self.is_active,
        }

    def flags(self) -> PermissionFlags:
        return PermissionFlags(**{field: getattr(self, field) for field in FLAG_FIELDS})


class SetFlagRequest(BaseModel):
    action: Action
    value: bool


class PageFlagsEntry(PermissionFlags):
    page: str


class BulkPermissionUpdate(BaseModel):
    entries: List[PageFlagsEntry]


class MatrixRow(PermissionFlags):
    page: str
    label: str
    icon: str
    depth: int = 0
    parent: Optional[str] = None


class PermissionMatrixResponse(BaseModel):
    user_id: UserId
    rows: List[MatrixRow]


class BulkPermissionUpdateResponse(BaseModel):
    user_id: UserId
    updated_count: int
    records: List[PermissionRecord]
    message: str


class MenuItem(BaseModel):
    key: str
    label: str
    icon: str
    children: List["MenuItem"] = []


class EffectivePermissionsResponse(BaseModel):
    user_id: UserId
    is_super_user: bool
    permissions: Dict[str, PermissionFlags]


MenuItem.model_rebuild()
