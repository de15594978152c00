# kushalwear/services/user_service.py
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from kushalwear.data.models.user import UserModel
from kushalwear.domain.errors import AuthError, ConflictError, NotFoundError, ValidationError
from kushalwear.domain.schemas import (
    ChangePasswordIn,
    LoginIn,
    Pagination,
    ProfileUpdateIn,
    SignupIn,
    UserAdminUpdateIn,
    UserOut,
)
from kushalwear.repos.user_repo import UserRepo
from kushalwear.utils.security import create_access_token, dummy_verify, hash_password, verify_password
from kushalwear.utils.logging import get_logger

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def public_profile(user: UserModel) -> UserOut:
    return UserOut.model_validate(user)


class UserService:
    """Konta: rejestracja, logowanie, profil, haslo + zarzadzanie przez admina."""

    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def signup(self, payload: SignupIn) -> Dict[str, Any]:
        email = payload.email.lower()
        if self.repo.get_by_email(email):
            raise ConflictError("User with this email already exists")

        try:
            user = self.repo.create_user(
                UserModel(
                    name=payload.name.strip(),
                    email=email,
                    password_hash=hash_password(payload.password),
                )
            )
        except IntegrityError:
            self.repo.rollback()
            raise ConflictError("User with this email already exists")

        logger.info(f"User {user.id} registered")
        return {
            "message": "User registered successfully",
            "token": create_access_token(user.id, user.role),
            "user": public_profile(user),
        }

    def login(self, payload: LoginIn) -> Dict[str, Any]:
        user = self.repo.get_by_email(payload.email)

        # nieznany email i zle haslo daja te sama odpowiedz
        if not user:
            dummy_verify()
            raise AuthError(INVALID_CREDENTIALS)
        if not verify_password(payload.password, user.password_hash):
            raise AuthError(INVALID_CREDENTIALS)

        if not user.is_active:
            raise AuthError("Account is deactivated")

        user.last_login = datetime.now(timezone.utc)
        user = self.repo.save(user)
        logger.info(f"User {user.id} logged in")

        return {
            "message": "Login successful",
            "token": create_access_token(user.id, user.role),
            "user": public_profile(user),
        }

    def get_user(self, user_id: str) -> UserModel:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def update_profile(self, user: UserModel, payload: ProfileUpdateIn) -> Dict[str, Any]:
        # tylko name, phone, address, avatar
        updates = payload.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in updates.items():
            setattr(user, field, value)
        user = self.repo.save(user)
        return {"message": "Profile updated successfully", "user": public_profile(user)}

    def change_password(self, user: UserModel, payload: ChangePasswordIn) -> Dict[str, Any]:
        if not verify_password(payload.current_password, user.password_hash):
            raise ValidationError("Current password is incorrect")

        user.password_hash = hash_password(payload.new_password)
        self.repo.save(user)
        logger.info(f"User {user.id} changed password")
        return {"message": "Password changed successfully"}

    def deactivate(self, user_id: str) -> UserModel:
        user = self.get_user(user_id)
        user.is_active = False
        logger.info(f"User {user_id} deactivated")
        return self.repo.save(user)

    # admin

    def list_users(self, page: int = 1, limit: int = 20, search: str | None = None) -> Dict[str, Any]:
        users, total = self.repo.list_users(page, limit, search)
        return {
            "users": [public_profile(u) for u in users],
            "pagination": Pagination.build(page, limit, total),
        }

    def admin_update(self, user_id: str, payload: UserAdminUpdateIn) -> Dict[str, Any]:
        user = self.get_user(user_id)
        updates = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "email" in updates and updates["email"]:
            updates["email"] = updates["email"].lower()

        for field, value in updates.items():
            setattr(user, field, value)

        try:
            user = self.repo.save(user)
        except IntegrityError:
            self.repo.rollback()
            raise ConflictError("Email already exists")

        return {"message": "User updated successfully", "user": public_profile(user)}
