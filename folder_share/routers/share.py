# folder_share/routers/share.py
# FastAPI router for folder sharing (publish + fetch by id)

from __future__ import annotations

import json

from fastapi import APIRouter, Depends, Request, Response
from pydantic import ValidationError

from folder_share.config import get_settings
from folder_share.constants import JSON_CONTENT_TYPE
from folder_share.middleware.error_handler import (
    AppError,
    DataMissingError,
    InvalidPayloadError,
    NotFoundOrExpiredError,
    UnsupportedMediaTypeError,
)
from folder_share.observability.metrics import record_fetch, record_publish
from folder_share.schemas.share import ErrorResponse, ShareRequest, ShareResponse
from folder_share.services.share_service import ShareService, build_share_service
from folder_share.utils.logger import log_info


router = APIRouter(tags=["Share"])


def _reject_constant(token: str):
    """NaN and Infinity are not JSON; strict clients could not read them back."""
    raise ValueError(f"non-standard JSON constant {token}")


def get_share_service() -> ShareService:
    return build_share_service(get_settings())


async def _read_share_request(request: Request) -> tuple[ShareRequest, dict]:
    """Content type first, then JSON, then shape. Returns model and raw body."""
    content_type = request.headers.get("content-type", "")
    if JSON_CONTENT_TYPE not in content_type.lower():
        log_info(f"publish: invalid content type {content_type!r}")
        raise UnsupportedMediaTypeError()

    try:
        body = json.loads(await request.body(), parse_constant=_reject_constant)
    except ValueError as e:  # JSONDecodeError, UnicodeDecodeError, NaN / Infinity
        log_info(f"publish: invalid JSON - {e}")
        raise InvalidPayloadError()

    try:
        return ShareRequest.model_validate(body), body
    except ValidationError as e:
        log_info(f"publish: payload validation failed ({e.error_count()} errors)")
        raise InvalidPayloadError()


@router.post(
    "/share/folder",
    response_model=ShareResponse,
    responses={
        400: {"model": ErrorResponse},
        415: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def publish_folder(
    request: Request,
    service: ShareService = Depends(get_share_service),
) -> ShareResponse:
    """Store a folder (or reuse a live identical one) and return its share id."""
    try:
        share_request, body = await _read_share_request(request)
        # sign what the client sent, not the model dump: unknown world keys are kept
        result = await service.publish(share_request.name, body["worlds"], share_request.hmac)
    except AppError:
        record_publish("rejected")
        raise

    record_publish("created" if result.created else "deduplicated")
    return ShareResponse(id=result.id)


@router.get(
    "/share/folder/{share_id}",
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def fetch_folder(
    share_id: str,
    service: ShareService = Depends(get_share_service),
) -> Response:
    """Return the stored `{name, worlds}` JSON byte-for-byte."""
    try:
        body = await service.fetch(share_id)
    except NotFoundOrExpiredError:
        record_fetch("not_found")
        raise
    except DataMissingError:
        record_fetch("data_missing")
        raise

    record_fetch("ok")
    return Response(content=body, media_type=JSON_CONTENT_TYPE)
