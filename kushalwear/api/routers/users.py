# kushalwear/api/routers/users.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from kushalwear.api.deps import get_current_user, require_admin
from kushalwear.data.database import get_db
from kushalwear.data.models.user import UserModel
from kushalwear.domain.schemas import (
    ChangePasswordIn,
    MessageOut,
    ProfileUpdateIn,
    UserAdminUpdateIn,
    UserListOut,
    UserResponse,
)
from kushalwear.services.user_service import UserService, public_profile

router = APIRouter(prefix="/users", tags=["users"])


def get_service(db: Session):
    return UserService(db)


@router.get("", response_model=UserListOut)
def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=100),
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return get_service(db).list_users(page=page, limit=limit, search=search)


@router.delete("/account", response_model=MessageOut, response_model_exclude_none=True)
def delete_account(
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    get_service(db).deactivate(user.id)
    return {"message": "Account deleted successfully"}


# profil wlasny, te same operacje co /auth/profile i /auth/change-password

@router.get("/profile", response_model=UserResponse, response_model_exclude_none=True)
def get_profile(user: UserModel = Depends(get_current_user)):
    return {"user": public_profile(user)}


@router.put("/profile", response_model=UserResponse, response_model_exclude_none=True)
def update_profile(
    payload: ProfileUpdateIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).update_profile(user, payload)


@router.post("/change-password", response_model=MessageOut, response_model_exclude_none=True)
def change_password(
    payload: ChangePasswordIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).change_password(user, payload)


@router.get("/{user_id}", response_model=UserResponse, response_model_exclude_none=True)
def get_user(
    user_id: str,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return {"user": public_profile(get_service(db).get_user(user_id))}


@router.put("/{user_id}", response_model=UserResponse, response_model_exclude_none=True)
def update_user(
    user_id: str,
    payload: UserAdminUpdateIn,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return get_service(db).admin_update(user_id, payload)


@router.delete("/{user_id}", response_model=MessageOut, response_model_exclude_none=True)
def delete_user(
    user_id: str,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    get_service(db).deactivate(user_id)
    return {"message": "User deleted successfully"}
