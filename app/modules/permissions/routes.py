from fastapi import APIRouter, Depends, HTTPException, status
from app.config.page_catalog import PAGE_CATALOG
from app.core.dependencies import (
    get_current_user_id,
    get_permission_resolver,
    get_permission_service,
    get_permission_session,
    get_user_directory,
    require_super_user,
)
from app.core.errors import CatalogError
from app.modules.permissions.menu import filter_visible, to_menu_items
from app.modules.permissions.resolver import PermissionResolver, PermissionSession, PermissionSnapshot
from app.modules.permissions.schemas import (
    BulkPermissionUpdate, BulkPermissionUpdateResponse, EffectivePermissionsResponse,
    MenuItem, PermissionMatrixResponse, PermissionRecord, SetFlagRequest,
)
from app.modules.permissions.service import PermissionService
from app.modules.users.schemas import UserResponse
from app.modules.users.service import UserDirectory
from typing import Dict, List

router = APIRouter(prefix="/permissions", tags=["permissions"])


@router.get("/catalog", response_model=List[MenuItem])
async def get_catalog(
    user_data: Dict = Depends(get_current_user_id)
):
    """Full page catalog, unfiltered"""
    return to_menu_items(PAGE_CATALOG)


# Acting user
@router.get("/me", response_model=EffectivePermissionsResponse)
async def get_my_permissions(
    user_data: Dict = Depends(get_current_user_id),
    session: PermissionSession = Depends(get_permission_session),
    service: PermissionService = Depends(get_permission_service),
    directory: UserDirectory = Depends(get_user_directory)
):
    """Resolved flags for every catalog key, for the acting user (super users get allow-all)"""
    is_super_user = directory.is_super_user(user_data)
    snapshot = PermissionSnapshot(user_data["id"], {}) if is_super_user else session.snapshot
    permissions = {page: record.flags() for page, record in service.matrix_from_snapshot(snapshot).items()}
    return EffectivePermissionsResponse(
        user_id=user_data["id"],
        is_super_user=is_super_user,
        permissions=permissions,
    )


@router.get("/me/menu", response_model=List[MenuItem])
async def get_my_menu(
    user_data: Dict = Depends(get_current_user_id),
    session: PermissionSession = Depends(get_permission_session),
    directory: UserDirectory = Depends(get_user_directory)
):
    """Navigation menu pruned to the pages the acting user may view (super users see everything)"""
    if directory.is_super_user(user_data):
        return to_menu_items(PAGE_CATALOG)
    return to_menu_items(filter_visible(PAGE_CATALOG, session.get))


@router.get("/me/{page}", response_model=PermissionRecord)
async def resolve_my_permission(
    page: str,
    user_data: Dict = Depends(get_current_user_id),
    resolver: PermissionResolver = Depends(get_permission_resolver),
    directory: UserDirectory = Depends(get_user_directory)
):
    """Effective permission of the acting user on one page (allow-all when no rule exists or for super users)"""
    if directory.is_super_user(user_data):
        return PermissionRecord.allow_all(user_data["id"], page)
    return resolver.resolve(user_data["id"], page)


# Permission editor (super users only)
@router.get("/users", response_model=List[UserResponse])
async def list_editable_users(
    user_data: Dict = Depends(require_super_user),
    directory: UserDirectory = Depends(get_user_directory)
):
    """Active users whose permissions can be edited"""
    return directory.list_users(include_super_users=False)


@router.get("/users/{user_id}", response_model=PermissionMatrixResponse)
async def get_user_matrix(
    user_id: str,
    user_data: Dict = Depends(require_super_user),
    service: PermissionService = Depends(get_permission_service),
    directory: UserDirectory = Depends(get_user_directory)
):
    """Complete permission matrix for a target user"""
    target = directory.get_user(user_id)
    matrix = service.load_matrix(target.id)
    return service.describe_matrix(target.id, matrix)


@router.patch("/users/{user_id}/pages/{page}", response_model=PermissionRecord)
async def set_user_flag(
    user_id: str,
    page: str,
    flag: SetFlagRequest,
    user_data: Dict = Depends(require_super_user),
    service: PermissionService = Depends(get_permission_service),
    directory: UserDirectory = Depends(get_user_directory)
):
    """Set one action flag on one page; the page's full row is written"""
    target = directory.get_user(user_id)
    matrix = service.load_matrix(target.id, strict=True)
    try:
        return service.set_flag(matrix, target.id, page, flag.action, flag.value)
    except CatalogError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.put("/users/{user_id}", response_model=BulkPermissionUpdateResponse)
async def save_user_matrix(
    user_id: str,
    bulk_data: BulkPermissionUpdate,
    user_data: Dict = Depends(require_super_user),
    service: PermissionService = Depends(get_permission_service),
    directory: UserDirectory = Depends(get_user_directory)
):
    """Bulk replace every catalog row for a target user"""
    target = directory.get_user(user_id)
    try:
        records = service.save_matrix(target.id, bulk_data.entries)
    except CatalogError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return BulkPermissionUpdateResponse(
        user_id=target.id,
        updated_count=len(records),
        records=records,
        message=f"Updated user with {len(records)} page permissions"
    )


@router.delete("/users/{user_id}/pages/{page}", status_code=204)
async def deactivate_user_page(
    user_id: str,
    page: str,
    user_data: Dict = Depends(require_super_user),
    service: PermissionService = Depends(get_permission_service),
    directory: UserDirectory = Depends(get_user_directory)
):
    """Deactivate the target user's rule for a page; the page falls back to allow-all"""
    target = directory.get_user(user_id)
    service.deactivate(target.id, page)
    return None
