from typing import Optional
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
import logging

from ..auth import get_current_user
from ..application.services.dashboard_service import DashboardService
from ..dependencies import get_dashboard_service
from ..schemas.uploads.upload import DeleteResponse, UploadPageResponse, UploadResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/uploads", tags=["Uploads"])


@router.get("", response_model=UploadPageResponse)
def list_uploads(
    page: int = Query(0, ge=0),
    current_user: str = Depends(get_current_user),
    service: DashboardService = Depends(get_dashboard_service),
):
    result = service.list_page(current_user, page)
    return UploadPageResponse(
        items=[UploadResponse(**r.to_dict()) for r in result.items],
        page=result.page,
        page_size=result.page_size,
        has_more=result.has_more,
    )


@router.post("", response_model=UploadResponse, status_code=201)
async def create_upload(
    text: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    current_user: str = Depends(get_current_user),
    service: DashboardService = Depends(get_dashboard_service),
):
    record = await service.upload(current_user, file=file, text=text)
    return UploadResponse(**record.to_dict())


@router.delete("/{upload_id}", response_model=DeleteResponse)
def delete_upload(
    upload_id: str,
    current_user: str = Depends(get_current_user),
    service: DashboardService = Depends(get_dashboard_service),
):
    service.delete(current_user, upload_id)
    return DeleteResponse(success=True)
