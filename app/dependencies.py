import logging
from functools import lru_cache
from fastapi import Depends, HTTPException, Request
from sqlmodel import Session

from .config import settings
from .database import get_session
from .storage import get_storage
from .application.ports.audit_logger import AuditLogger
from .application.ports.rate_limiter import RateLimiter
from .application.ports.storage_repo import ObjectStorage
from .application.services.anonymous_service import AnonymousShareService
from .application.services.dashboard_service import DashboardService
from .infrastructure.audit.std_logger import StdAuditLogger
from .infrastructure.persistence.sqlalchemy.repositories.upload_repository_sql import SqlUploadRepository
from .infrastructure.rate_limit import build_rate_limiter

logger = logging.getLogger(__name__)


@lru_cache()
def get_audit_logger() -> AuditLogger:
    return StdAuditLogger()


@lru_cache()
def get_rate_limiter() -> RateLimiter:
    return build_rate_limiter(settings.REDIS_URL)


def get_upload_repo(session: Session = Depends(get_session)) -> SqlUploadRepository:
    return SqlUploadRepository(session)


def get_anonymous_service(
    repo: SqlUploadRepository = Depends(get_upload_repo),
    storage: ObjectStorage = Depends(get_storage),
    audit: AuditLogger = Depends(get_audit_logger),
) -> AnonymousShareService:
    return AnonymousShareService(repo=repo, storage=storage, audit=audit)


def get_dashboard_service(
    repo: SqlUploadRepository = Depends(get_upload_repo),
    storage: ObjectStorage = Depends(get_storage),
    audit: AuditLogger = Depends(get_audit_logger),
) -> DashboardService:
    return DashboardService(repo=repo, storage=storage, audit=audit)


def code_lookup_rate_limit(request: Request, limiter: RateLimiter = Depends(get_rate_limiter)) -> None:
    """Throttle share-code lookups per client IP."""
    client_ip = request.client.host if request.client else "unknown"
    if not limiter.allow(f"code-lookup:{client_ip}", settings.CODE_LOOKUP_LIMIT, settings.CODE_LOOKUP_WINDOW_SEC):
        logger.warning(f"Code lookup rate limit exceeded for IP: {client_ip}")
        raise HTTPException(status_code=429, detail="Too many attempts. Please try again later.")
