"""
User Endpoints

    POST /users/register   public   create a CLIENT account
    POST /users/login      public   exchange credentials for a token
    POST /users/logout     any      revoke the current token
    GET  /users/me         any      own profile
    GET  /users            ADMIN    every user
    GET  /users/{id}       self / ADMIN
    PUT  /users/{id}       self / ADMIN
"""

from typing import List

from fastapi import APIRouter, Depends

from uaifood.core.security import TokenClaims
from uaifood.schemas import (
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterResponse,
    UserCreate,
    UserResponse,
    UserSummary,
    UserUpdate,
)
from uaifood.services.access import Action, Principal
from uaifood.services.revocation import BaseTokenBlacklist, get_token_blacklist
from uaifood.services.users import UserService
from uaifood.routers.deps import EntityId, get_token_claims, get_user_service, require

router = APIRouter(prefix="/users", tags=["Users"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}},
    summary="Register",
)
async def register(
    user_data: UserCreate,
    service: UserService = Depends(get_user_service),
):
    """Create a new account. The role is always CLIENT."""
    user = await service.register(user_data)
    return RegisterResponse(
        message="User created successfully.",
        user=UserResponse.model_validate(user),
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"model": ErrorResponse}},
    summary="Login",
)
async def login(
    credentials: LoginRequest,
    service: UserService = Depends(get_user_service),
):
    user, token = await service.authenticate(credentials.email, credentials.password)
    return LoginResponse(
        message="Login successful.",
        token=token,
        user=UserSummary.model_validate(user),
    )


@router.post("/logout", response_model=MessageResponse, summary="Logout")
async def logout(
    claims: TokenClaims = Depends(get_token_claims),
    blacklist: BaseTokenBlacklist = Depends(get_token_blacklist),
    service: UserService = Depends(get_user_service),
):
    await service.logout(claims, blacklist)
    return MessageResponse(message="Logout successful.")


@router.get("/me", response_model=UserResponse, summary="Current User")
async def get_me(
    principal: Principal = Depends(require(Action.USER_SESSION)),
    service: UserService = Depends(get_user_service),
):
    return await service.get(principal.id)


@router.get(
    "",
    response_model=List[UserResponse],
    dependencies=[Depends(require(Action.USER_LIST))],
    summary="List Users",
)
async def list_users(service: UserService = Depends(get_user_service)):
    return await service.list_all()


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="User by ID",
)
async def get_user(
    user_id: EntityId,
    principal: Principal = Depends(require(Action.USER_VIEW)),
    service: UserService = Depends(get_user_service),
):
    return await service.get_for(principal, user_id)


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
    summary="Update User",
)
async def update_user(
    user_id: EntityId,
    user_data: UserUpdate,
    principal: Principal = Depends(require(Action.USER_UPDATE)),
    service: UserService = Depends(get_user_service),
):
    return await service.update(principal, user_id, user_data)
