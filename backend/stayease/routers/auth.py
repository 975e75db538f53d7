"""
Account routes
"""
from fastapi import APIRouter, Depends, HTTPException, status, Request, Response
from stayease.config import Settings
from stayease.exceptions import DuplicateUsernameError
from stayease.models.entities import User
from stayease.models.schemas import RegisterRequest, LoginRequest, PublicUser
from stayease.services.user_service import UserService, to_public
from stayease.security.auth import (
    get_app_settings, get_current_user, start_session, end_session
)
from stayease.storage import Storage, get_storage

router = APIRouter(tags=["Accounts"])


@router.post("/register", response_model=PublicUser, status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    response: Response,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings)
):
    """Create an account and log it in"""
    service = UserService(storage)
    try:
        user = await service.register(data)
    except DuplicateUsernameError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    await start_session(response, user, storage, settings)
    return to_public(user)


@router.post("/login", response_model=PublicUser)
async def login(
    data: LoginRequest,
    response: Response,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings)
):
    """Log in"""
    user = await UserService(storage).authenticate(data.username, data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password"
        )

    await start_session(response, user, storage, settings)
    return to_public(user)


@router.get("/logout")
async def logout(
    request: Request,
    response: Response,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings)
):
    """Log out"""
    await end_session(request, response, storage, settings)
    return {"message": "Logged out successfully"}


@router.get("/user", response_model=PublicUser)
async def get_user(current_user: User = Depends(get_current_user)):
    """Current user"""
    return to_public(current_user)
