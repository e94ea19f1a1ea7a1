from fastapi import APIRouter, Depends, Request, Response
from typing import Optional
from ....core.config import settings
from ....db.repositories.users import UserRepository
from ....schemas.api import ApiRequest
from ....services.user_service import dispatch
from ...deps import get_user_repository

router = APIRouter()

METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


async def _handle(request: Request, repository: UserRepository, email: Optional[str] = None) -> Response:
    body = await request.body() or None
    api_request = ApiRequest(
        method=request.method,
        path_parameters={"email": email} if email else {},
        body=body
    )
    result = await dispatch(api_request, repository, settings.LEGACY_STATUS_CODES)
    return Response(
        content=result.body,
        status_code=result.status_code,
        headers=result.headers
    )


@router.api_route("", methods=METHODS)
async def users(request: Request, repository: UserRepository = Depends(get_user_repository)):
    """List, create, update or delete users; the target user travels in the body"""
    return await _handle(request, repository)


@router.api_route("/{email}", methods=METHODS)
async def user_by_email(
    email: str,
    request: Request,
    repository: UserRepository = Depends(get_user_repository)
):
    """Fetch one user by email.

    Writes ignore the path and take the target email from the body, as on the
    collection route.
    """
    return await _handle(request, repository, email)
