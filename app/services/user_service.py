import json
import logging
from ..core.errors import UserError, UserErrorKind
from ..db.repositories.users import UserRepository
from ..schemas.api import ApiRequest, ApiResponse

logger = logging.getLogger(__name__)

METHOD_NOT_ALLOWED = "Method not allowed"

ERROR_STATUS = {
    UserErrorKind.INVALID_INPUT: 400,
    UserErrorKind.INVALID_EMAIL: 400,
    UserErrorKind.RECORD_NOT_FOUND: 404,
    UserErrorKind.NOT_FOUND: 404,
    UserErrorKind.ALREADY_EXISTS: 409,
}


def _dumps(payload) -> str:
    return json.dumps(payload, separators=(",", ":"))


def api_response(status_code: int, payload=None) -> ApiResponse:
    body = "" if payload is None else _dumps(payload)
    return ApiResponse(status_code=status_code, body=body)


def error_response(error: UserError, legacy_status_codes: bool = False) -> ApiResponse:
    if legacy_status_codes:
        status_code = 500
    else:
        status_code = ERROR_STATUS.get(error.kind, 500)
    return api_response(status_code, {"error": error.message})


async def get_user(request: ApiRequest, repository: UserRepository) -> ApiResponse:
    email = request.path_parameters.get("email")
    if email:
        user = await repository.fetch_user(email)
        return api_response(200, user.model_dump(by_alias=True))

    users = await repository.fetch_users()
    return api_response(200, [user.model_dump(by_alias=True) for user in users])


async def create_user(request: ApiRequest, repository: UserRepository) -> ApiResponse:
    user = await repository.create_user(request.body)
    return api_response(201, user.model_dump(by_alias=True))


async def update_user(
    request: ApiRequest,
    repository: UserRepository,
    legacy_status_codes: bool = False
) -> ApiResponse:
    user = await repository.update_user(request.body)
    # Legacy clients expect 201 Created on update
    return api_response(201 if legacy_status_codes else 200, user.model_dump(by_alias=True))


async def delete_user(request: ApiRequest, repository: UserRepository) -> ApiResponse:
    await repository.delete_user(request.body)
    return api_response(204)


async def dispatch(
    request: ApiRequest,
    repository: UserRepository,
    legacy_status_codes: bool = False
) -> ApiResponse:
    """Run the repository call selected by the request method.

    Every ``UserError`` becomes an ``{"error": message}`` response; the status
    follows the error kind unless ``legacy_status_codes`` asks for the
    legacy all-500 mapping.
    """
    method = request.method.upper()
    try:
        if method == "GET":
            return await get_user(request, repository)
        if method == "POST":
            return await create_user(request, repository)
        if method == "PUT":
            return await update_user(request, repository, legacy_status_codes)
        if method == "DELETE":
            return await delete_user(request, repository)
    except UserError as e:
        logger.info(f"{method} users failed: {e.kind.value} ({e.message})")
        return error_response(e, legacy_status_codes)

    return api_response(405, {"error": METHOD_NOT_ALLOWED})
