"""
Request Lifecycle Helpers
Universal abort path shared by the submission and ingestion workflows
"""
from uuid import UUID

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from application.repositories.interfaces import IResumeRequestRepository


async def record_failure(
    session: AsyncSession,
    request_repo: IResumeRequestRepository,
    request_id: UUID,
    error_message: str
) -> bool:
    """
    Mark a request as failed in its own transaction.

    Anything pending in the session is discarded first. A failure here is
    logged and reported through the return value; the caller is already
    aborting with its own error.
    """
    try:
        await session.rollback()
        await request_repo.mark_failed(request_id, error_message)
        await session.commit()
        logger.warning(f"⚠️ Request {request_id} marked as failed: {error_message}")
        return True
    except Exception as e:
        await session.rollback()
        logger.error(f"❌ Could not mark request {request_id} as failed: {e}")
        return False
