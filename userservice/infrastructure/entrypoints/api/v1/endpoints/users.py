from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi import Query
from fastapi import status
from fastapi.responses import JSONResponse

from userservice.application.services.users import UserService
from userservice.domain.exceptions import TaskRejectedError
from userservice.domain.exceptions import UserAlreadyExistsException
from userservice.domain.exceptions import UserNotFound
from userservice.domain.schemas.user import UserCreate
from userservice.domain.schemas.user import UserResponse
from userservice.domain.schemas.user import UserUpdate
from userservice.infrastructure.entrypoints.api.dependencies import get_user_service
from userservice.infrastructure.entrypoints.api.schemas import ConflictResponse
from userservice.infrastructure.entrypoints.api.schemas import ErrorResponse

router = APIRouter()


def conflict_response(exc: UserAlreadyExistsException) -> JSONResponse:
    content = ConflictResponse(detail=str(exc), field=exc.field)
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=content.model_dump(mode="json"))


@router.get("", name="user_list")
async def list_active_users(user_service: UserService = Depends(get_user_service)) -> list[UserResponse]:
    return await user_service.get_all_active_users()


@router.post(
    "",
    name="user_create",
    status_code=status.HTTP_201_CREATED,
    response_model=UserResponse,
    responses={status.HTTP_409_CONFLICT: {"model": ConflictResponse}},
)
async def create_user(
    user_data: UserCreate,
    user_service: UserService = Depends(get_user_service),
) -> UserResponse | JSONResponse:
    try:
        return await user_service.create_user(user_data)
    except UserAlreadyExistsException as e:
        return conflict_response(e)


@router.get("/search", name="user_search")
async def search_users(
    name: str = Query(..., min_length=1, description="Fragment of the full name (case-sensitive)"),
    user_service: UserService = Depends(get_user_service),
) -> list[UserResponse]:
    return await user_service.search_users_by_name(name)


@router.get(
    "/by-username/{username}",
    name="user_by_username",
    responses={
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
        status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse},
    },
)
async def get_user_by_username(
    username: str,
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    try:
        future = user_service.get_user_by_username_async(username)
    except TaskRejectedError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)) from e

    try:
        return await future
    except UserNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.get("/{user_id}", name="user_detail", responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}})
async def get_user(user_id: int, user_service: UserService = Depends(get_user_service)) -> UserResponse:
    try:
        return await user_service.get_user_by_id(user_id)
    except UserNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.put(
    "/{user_id}",
    name="user_update",
    response_model=UserResponse,
    responses={
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
        status.HTTP_409_CONFLICT: {"model": ConflictResponse},
    },
)
async def update_user(
    user_id: int,
    user_data: UserUpdate,
    user_service: UserService = Depends(get_user_service),
) -> UserResponse | JSONResponse:
    try:
        return await user_service.update_user(user_id, user_data)
    except UserNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except UserAlreadyExistsException as e:
        return conflict_response(e)


@router.delete(
    "/{user_id}",
    name="user_deactivate",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
async def deactivate_user(user_id: int, user_service: UserService = Depends(get_user_service)) -> None:
    try:
        await user_service.deactivate_user(user_id)
    except UserNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
