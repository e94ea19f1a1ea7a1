"""AWS Lambda entry point for API Gateway proxy events."""
import asyncio
import base64
import binascii
import logging
from .api.deps import get_user_repository
from .core.config import settings
from .core.logging_config import setup_logging
from .schemas.api import ApiRequest
from .services.user_service import dispatch

logger = logging.getLogger(__name__)


def _event_body(event):
    body = event.get("body")
    if body and event.get("isBase64Encoded"):
        try:
            # Raw bytes; the JSON parser reports bad encodings as invalid input
            return base64.b64decode(body, validate=True)
        except binascii.Error as e:
            logger.info(f"Discarding undecodable base64 body: {str(e)}")
            return None
    return body


def handler(event, context, repository=None):
    setup_logging(settings.LOG_LEVEL)

    api_request = ApiRequest(
        method=event.get("httpMethod") or "",
        path_parameters=event.get("pathParameters") or {},
        body=_event_body(event)
    )
    if repository is None:
        repository = get_user_repository()
    response = asyncio.run(dispatch(api_request, repository, settings.LEGACY_STATUS_CODES))
    return response.to_envelope()
