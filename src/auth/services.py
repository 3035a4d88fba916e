import hmac
import logging
import uuid
from datetime import datetime, timedelta, timezone
from hashlib import sha256

import jwt
from fastapi import Depends
from fastapi.params import Depends as DependsType

from ..core import exceptions, settings
from .dto import (
    AuthResponse,
    JWTResponse,
    LoginPayload,
    RegisterPayload,
    UserResponse,
    UserResponseFlat,
)
from .models import User
from .repositories import UserRepository, get_user_repository

logger = logging.getLogger(__name__)


class JWTService:
    @staticmethod
    def hash_password(password: str) -> str:
        return sha256(password.encode()).hexdigest()

    @staticmethod
    def verify_password(password: str, password_hash: str) -> bool:
        return hmac.compare_digest(JWTService.hash_password(password), password_hash)

    @staticmethod
    def create_jwt(data: dict, expires_delta: timedelta | None = None) -> JWTResponse:
        expires_delta = expires_delta or timedelta(
            minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES
        )
        to_encode = {**data, "exp": datetime.now(timezone.utc) + expires_delta}
        token = jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
        return JWTResponse(access_token=token)

    @staticmethod
    def decode_jwt(token: str) -> dict:
        # Raises jwt.ExpiredSignatureError / jwt.InvalidTokenError
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])


class UserService:
    def __init__(
        self,
        repository: UserRepository = Depends(get_user_repository),
    ) -> None:
        if isinstance(repository, DependsType):
            repository = repository.dependency()
        self.repository = repository

    def register(self, payload: RegisterPayload) -> AuthResponse:
        self.validate_email_unique(payload.email)
        user = self.repository.create(self.create_domain_user_instance(payload))
        logger.info("Registered user %s", user.id)
        return self.create_auth_response(user)

    def login(self, payload: LoginPayload) -> AuthResponse:
        return self.create_auth_response(self.authenticate(payload.email, payload.password))

    def sign_in_oauth(self, username: str, password: str) -> JWTResponse:
        # OAuth2 password flow calls the field "username", we use the email there
        user = self.authenticate(username, password)
        return JWTService.create_jwt({"sub": str(user.id)})

    def authenticate(self, email: str, password: str) -> User:
        user = self.repository.get_user_by_email(email)
        # Same error for unknown email and wrong password
        if not user or not JWTService.verify_password(password, user.password_hash):
            logger.warning("Failed sign in attempt for %s", email)
            raise exceptions.InvalidCredentialsException
        return user

    def get_current_user(self, token: str) -> User:
        try:
            payload = JWTService.decode_jwt(token)
        except jwt.ExpiredSignatureError:
            raise exceptions.ExpiredJWTException
        except jwt.InvalidTokenError:
            raise exceptions.AuthenticationFailedException

        subject = payload.get("sub")
        if not subject:
            raise exceptions.BadJWTException
        try:
            user_id = uuid.UUID(subject)
        except ValueError:
            raise exceptions.BadJWTException

        user = self.repository.get_by_id(user_id)
        if not user:
            raise exceptions.UserNotFound
        return user

    def get_current_user_id(self, token: str) -> uuid.UUID:
        return self.get_current_user(token).id

    # Domain object manipulation
    def create_domain_user_instance(self, payload: RegisterPayload) -> User:
        return User(
            email=payload.email,
            name=payload.name,
            password_hash=JWTService.hash_password(payload.password),
        )

    # Validation
    def validate_email_unique(self, email: str) -> None:
        if not self.repository.check_email_unique(email):
            raise exceptions.EmailAlreadyRegistered

    # Serialization
    def create_auth_response(self, user: User) -> AuthResponse:
        token = JWTService.create_jwt({"sub": str(user.id), "email": user.email}).access_token
        return AuthResponse(user=self.create_user_response(user), token=token)

    def create_user_response(self, user: User) -> UserResponse:
        return UserResponse(
            id=user.id,
            email=user.email,
            name=user.name,
            created_at=user.created_at,
        )

    def create_user_response_flat(self, user: User) -> UserResponseFlat:
        return UserResponseFlat(id=user.id, email=user.email, name=user.name)
