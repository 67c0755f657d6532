from typing import Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
import logging

from ..application.services.anonymous_service import AnonymousShareService
from ..dependencies import code_lookup_rate_limit, get_anonymous_service
from ..schemas.common.common import ErrorResponse
from ..schemas.uploads.upload import AnonymousUploadResponse, UploadResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Anonymous"])


@router.post(
    "/anonymous-upload",
    response_model=AnonymousUploadResponse,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def anonymous_upload(
    code: Optional[str] = Form(None),
    text: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    service: AnonymousShareService = Depends(get_anonymous_service),
):
    record = await service.upload(code, file=file, text=text)
    return AnonymousUploadResponse(code=record.code, success=True)


@router.get(
    "/anonymous-download",
    response_model=UploadResponse,
    dependencies=[Depends(code_lookup_rate_limit)],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 429: {"model": ErrorResponse}},
)
def anonymous_download(
    code: Optional[str] = Query(None),
    service: AnonymousShareService = Depends(get_anonymous_service),
):
    if not code:
        raise HTTPException(status_code=400, detail="Code is required")
    record = service.resolve(code)
    return UploadResponse(**record.to_dict())
