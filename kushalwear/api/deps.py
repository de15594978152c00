# kushalwear/api/deps.py
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from kushalwear.data.database import get_db
from kushalwear.data.models.user import UserModel
from kushalwear.domain.errors import AuthError, ForbiddenError
from kushalwear.repos.user_repo import UserRepo
from kushalwear.services.cart_service import CartService
from kushalwear.services.lock_service import BaseLockService
from kushalwear.utils.security import decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> UserModel:
    if credentials is None:
        raise AuthError("Access token required")

    payload = decode_access_token(credentials.credentials)
    user = UserRepo(db).get_user(payload["sub"])
    if not user:
        raise AuthError("Invalid token")
    if not user.is_active:
        raise AuthError("Account is deactivated")
    return user


def require_admin(user: UserModel = Depends(get_current_user)) -> UserModel:
    if not user.is_admin:
        raise ForbiddenError("Admin access required")
    return user


def get_lock_service(request: Request) -> BaseLockService:
    return request.app.state.lock_service


def get_cart_service(
    db: Session = Depends(get_db),
    lock_service: BaseLockService = Depends(get_lock_service),
) -> CartService:
    return CartService(db=db, lock_service=lock_service)
