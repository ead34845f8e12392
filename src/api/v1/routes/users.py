"""User API routes.

Example search query params:

    pageSize     = 15
    pageIndex    = 0
    sort         = last_name:asc,creation_date:desc
    roles        = researcher,other
    dataUses     = commercial_purpose,other
    roleOptions  = researcher,representative,developer
    usageOptions = identifying_dataset,commercial_purpose
"""

from typing import Any

from fastapi import APIRouter, Depends, Query, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_user_service
from api.v1.schemas.common import ErrorResponse, SuccessResponse
from api.v1.schemas.user import (
    PresignedUploadData,
    PresignedUploadResponse,
    UserDetailResponse,
    UserExistenceData,
    UserExistenceResponse,
    UserResponse,
    UserSearchResponse,
    UserWrite,
)
from core.config import settings
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.user import UserProfile
from domain.services.user_search import parse_sort
from domain.services.user_service import UserService
from domain.services.visibility import redact

router = APIRouter(prefix="/users", tags=["users"])


def _split(value: str | None) -> list[str]:
    """Split a comma-separated query parameter."""
    if not value:
        return []
    return [item for item in (part.strip() for part in value.split(",")) if item]


def _own_detail(user: UserProfile) -> UserDetailResponse:
    return UserDetailResponse(data=UserResponse(**redact(user, is_own_record=True)))


def _detail(values: dict[str, Any]) -> UserDetailResponse:
    return UserDetailResponse(data=UserResponse(**values))


@router.get(
    "/search",
    response_model=UserSearchResponse,
    response_model_exclude_unset=True,
    summary="Search registered users",
    responses={
        200: {"description": "One page of users with public fields only"},
        400: {"description": "Missing filter options or invalid sort"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def search_users(
    request: Request,
    user: CurrentUser,
    page_size: int = Query(
        settings.search_default_page_size,
        ge=0,
        le=settings.search_max_page_size,
        alias="pageSize",
    ),
    page_index: int = Query(0, ge=0, alias="pageIndex"),
    sort: str | None = Query(None),
    match: str | None = Query(None),
    roles: str | None = Query(None),
    data_uses: str | None = Query(None, alias="dataUses"),
    role_options: str | None = Query(None, alias="roleOptions"),
    usage_options: str | None = Query(None, alias="usageOptions"),
    service: UserService = Depends(get_user_service),
) -> UserSearchResponse:
    """Search completed registrations by name/affiliation text, roles and usages.

    Filtering on ``other`` requires the matching ``roleOptions`` or
    ``usageOptions`` list of known codes.
    """
    result = await service.search(
        page_size=page_size,
        page_index=page_index,
        sort=parse_sort(sort),
        match=match,
        roles=_split(roles),
        data_uses=_split(data_uses),
        role_options=_split(role_options),
        usage_options=_split(usage_options),
    )
    return UserSearchResponse(
        data=[UserResponse(**row) for row in result.users],
        meta={"total": result.total, "pageIndex": page_index, "pageSize": page_size},
    )


@router.get(
    "/exists",
    response_model=UserExistenceResponse,
    summary="Check whether the caller has a registration",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def user_exists(
    request: Request,
    user: CurrentUser,
    service: UserService = Depends(get_user_service),
) -> UserExistenceResponse:
    """Report whether the caller has a record and whether registration is complete."""
    existence = await service.exists(user.id)
    return UserExistenceResponse(
        data=UserExistenceData(
            exists=existence.exists,
            completed_registration=existence.completed_registration,
        )
    )


@router.get(
    "/image/presigned",
    response_model=PresignedUploadResponse,
    summary="Get a profile image upload URL",
    responses={400: {"description": "Object storage failure"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def get_profile_image_upload_url(
    request: Request,
    user: CurrentUser,
    service: UserService = Depends(get_user_service),
) -> PresignedUploadResponse:
    """Presign a PUT of the caller's profile image."""
    upload = await service.get_profile_image_upload_url(user.id)
    return PresignedUploadResponse(
        data=PresignedUploadData(s3_key=upload.s3_key, presign_url=upload.presign_url)
    )


@router.delete(
    "/image",
    response_model=SuccessResponse,
    summary="Delete the caller's profile image",
    responses={400: {"description": "Object storage failure"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_profile_image(
    request: Request,
    user: CurrentUser,
    service: UserService = Depends(get_user_service),
) -> SuccessResponse:
    await service.delete_profile_image(user.id)
    return SuccessResponse()


@router.get(
    "",
    response_model=UserDetailResponse,
    response_model_exclude_unset=True,
    summary="Get own user",
    responses={404: {"model": ErrorResponse, "description": "User not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_own_user(
    request: Request,
    user: CurrentUser,
    service: UserService = Depends(get_user_service),
) -> UserDetailResponse:
    """Get the caller's own record with every field."""
    return _detail(await service.get_visible(user.id))


@router.get(
    "/{keycloak_id}",
    response_model=UserDetailResponse,
    response_model_exclude_unset=True,
    summary="Get a user",
    responses={404: {"model": ErrorResponse, "description": "User not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_user(
    request: Request,
    keycloak_id: str,
    user: CurrentUser,
    service: UserService = Depends(get_user_service),
) -> UserDetailResponse:
    """Get a user by identity. Other users' records only carry public fields."""
    return _detail(await service.get_visible(user.id, keycloak_id))


@router.post(
    "",
    response_model=UserDetailResponse,
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create own user",
    responses={
        201: {"description": "User created successfully"},
        409: {"description": "User already exists"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_user(
    request: Request,
    body: UserWrite,
    user: CurrentUser,
    service: UserService = Depends(get_user_service),
) -> UserDetailResponse:
    """Create the caller's record, keyed by the verified token subject."""
    created = await service.create(user.id, body.to_payload())
    return _own_detail(created)


@router.put(
    "",
    response_model=UserDetailResponse,
    response_model_exclude_unset=True,
    summary="Update own user",
    responses={404: {"model": ErrorResponse, "description": "User not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_user(
    request: Request,
    body: UserWrite,
    user: CurrentUser,
    service: UserService = Depends(get_user_service),
) -> UserDetailResponse:
    """Overwrite the fields present in the body. Absent fields are left unchanged."""
    updated = await service.update(user.id, body.to_payload())
    return _own_detail(updated)


@router.put(
    "/complete-registration",
    response_model=UserDetailResponse,
    response_model_exclude_unset=True,
    summary="Complete own registration",
    responses={
        400: {"description": "Required registration fields are missing"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def complete_registration(
    request: Request,
    body: UserWrite,
    user: CurrentUser,
    service: UserService = Depends(get_user_service),
) -> UserDetailResponse:
    """Apply the body and mark the caller's registration complete."""
    updated = await service.complete_registration(user.id, body.to_payload())
    return _own_detail(updated)


@router.delete(
    "",
    response_model=SuccessResponse,
    summary="Delete own user",
    responses={404: {"model": ErrorResponse, "description": "User not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_user(
    request: Request,
    user: CurrentUser,
    service: UserService = Depends(get_user_service),
) -> SuccessResponse:
    """Anonymize the caller's record. The record can no longer be fetched or searched."""
    await service.delete(user.id)
    return SuccessResponse()
