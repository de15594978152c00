# kushalwear/api/routers/auth.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from kushalwear.api.deps import get_current_user
from kushalwear.data.database import get_db
from kushalwear.data.models.user import UserModel
from kushalwear.domain.schemas import (
    AuthOut,
    ChangePasswordIn,
    LoginIn,
    MessageOut,
    ProfileUpdateIn,
    SignupIn,
    UserResponse,
)
from kushalwear.services.user_service import UserService, public_profile

router = APIRouter(prefix="/auth", tags=["auth"])


def get_service(db: Session):
    return UserService(db)


@router.post("/signup", response_model=AuthOut, status_code=201)
def signup(payload: SignupIn, db: Session = Depends(get_db)):
    return get_service(db).signup(payload)


@router.post("/login", response_model=AuthOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    return get_service(db).login(payload)


@router.get("/me", response_model=UserResponse)
def me(user: UserModel = Depends(get_current_user)):
    return {"user": public_profile(user)}


@router.put("/profile", response_model=UserResponse)
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


@router.post("/logout", response_model=MessageOut, response_model_exclude_none=True)
def logout(user: UserModel = Depends(get_current_user)):
    # token jest bezstanowy, klient go po prostu wyrzuca
    return {"message": "Logout successful"}
