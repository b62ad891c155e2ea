"""FastAPI application exposing CRUD endpoints for user records."""
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.convertors import Convertor, register_url_convertor

from .config import Settings, load_settings
from .middleware import install_middleware
from .models import User
from .security import TokenAuthenticator
from .store import UserStore
from .validation import validate_user

logger = logging.getLogger("users_api.api")

INVALID_BODY = "Invalid request body."


class SignedIntegerConvertor(Convertor):
    regex = "-?[0-9]+"

    def convert(self, value: str) -> int:
        return int(value)

    def to_string(self, value: int) -> str:
        return str(int(value))


register_url_convertor("signed_int", SignedIntegerConvertor())


class UserNotFoundError(LookupError):
    def __init__(self, user_id: int) -> None:
        super().__init__(f"User with ID {user_id} was not found.")
        self.user_id = user_id


class UserValidationError(ValueError):
    pass


class UserPayload(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None
    email: Optional[str] = None


class UserResponse(BaseModel):
    id: int
    name: str
    email: str


def user_to_response(user: User) -> UserResponse:
    return UserResponse(id=user.id, name=user.name, email=user.email)


def _validated(payload: UserPayload) -> tuple[str, str]:
    message = validate_user(payload.name, payload.email)
    if message is not None:
        raise UserValidationError(message)
    assert payload.name is not None and payload.email is not None
    return payload.name, payload.email


def create_app(
    *,
    store: UserStore | None = None,
    authenticator: TokenAuthenticator | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    if settings is None:
        settings = load_settings()

    if store is None:
        store = UserStore(settings.seed_users)

    if authenticator is None:
        authenticator = TokenAuthenticator(settings.api_tokens)

    docs_enabled = settings.is_development
    app = FastAPI(
        title="User Directory API",
        description="In-memory user records behind a static bearer token gate",
        version="1.0.0",
        docs_url="/docs" if docs_enabled else None,
        redoc_url=None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )
    app.state.store = store
    app.state.settings = settings
    install_middleware(app, authenticator)

    def get_store() -> UserStore:
        return store

    router = APIRouter(prefix="/users")

    @router.get("", response_model=List[UserResponse], name="GetAllUsers")
    async def list_users(db: UserStore = Depends(get_store)) -> List[UserResponse]:
        return [user_to_response(user) for user in db.list_users()]

    @router.get("/{user_id:signed_int}", response_model=UserResponse, name="GetUserById")
    async def read_user(user_id: int, db: UserStore = Depends(get_store)) -> UserResponse:
        user = db.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user_to_response(user)

    @router.post(
        "",
        response_model=UserResponse,
        status_code=status.HTTP_201_CREATED,
        name="CreateUser",
    )
    async def create_user(
        payload: UserPayload,
        response: Response,
        db: UserStore = Depends(get_store),
    ) -> UserResponse:
        name, email = _validated(payload)
        created = db.insert(User(id=0, name=name, email=email))
        response.headers["Location"] = f"/users/{created.id}"
        logger.info("Created user %s", created.id)
        return user_to_response(created)

    @router.put("/{user_id:signed_int}", response_model=UserResponse, name="UpdateUser")
    async def update_user(
        user_id: int,
        payload: UserPayload,
        db: UserStore = Depends(get_store),
    ) -> UserResponse:
        if db.get(user_id) is None:
            raise UserNotFoundError(user_id)
        name, email = _validated(payload)
        updated = db.update(user_id, name, email)
        if updated is None:
            raise UserNotFoundError(user_id)
        logger.info("Updated user %s", user_id)
        return user_to_response(updated)

    @router.delete("/{user_id:signed_int}", status_code=status.HTTP_204_NO_CONTENT, name="DeleteUser")
    async def delete_user(user_id: int, db: UserStore = Depends(get_store)) -> Response:
        if not db.remove(user_id):
            raise UserNotFoundError(user_id)
        logger.info("Deleted user %s", user_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    app.include_router(router)

    @app.exception_handler(UserNotFoundError)
    async def handle_not_found(_: Request, exc: UserNotFoundError):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=str(exc))

    @app.exception_handler(UserValidationError)
    async def handle_invalid_user(_: Request, exc: UserValidationError):
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=str(exc))

    @app.exception_handler(RequestValidationError)
    async def handle_malformed_body(_: Request, exc: RequestValidationError):
        logger.debug("Rejected malformed request body: %s", exc.errors())
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=INVALID_BODY)

    return app


__all__ = [
    "UserNotFoundError",
    "UserPayload",
    "UserResponse",
    "UserValidationError",
    "create_app",
    "user_to_response",
]
