from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm

from ..core.auth import oauth2_scheme
from .dto import AuthResponse, JWTResponse, LoginPayload, RegisterPayload, UserResponse
from .services import UserService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=AuthResponse)
async def user_register(
    payload: RegisterPayload,
    service: UserService = Depends(UserService),
):
    return service.register(payload)


@router.post("/login", response_model=AuthResponse)
async def user_login(
    payload: LoginPayload,
    service: UserService = Depends(UserService),
):
    return service.login(payload)


@router.post("/token", response_model=JWTResponse)
async def sign_in_oauth(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    service: UserService = Depends(UserService),
):
    return service.sign_in_oauth(form_data.username, form_data.password)


@router.get("/me", response_model=UserResponse)
async def user_me(
    token: str = Depends(oauth2_scheme),
    service: UserService = Depends(UserService),
):
    return service.create_user_response(service.get_current_user(token))
