"""
Router for Google Drive push notifications.

Handles:
- Verification handshake (challenge echo)
- Change notifications, fanning out one extraction per changed file
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from ..config import Settings, get_settings
from ..models import ChallengeResponse, WebhookResponse
from ..services.ai import AIService, get_ai_service
from ..services.drive_service import DriveService, get_drive_service
from ..services.ingestion import extract_drive_file

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/webhooks", tags=["webhooks"])


@router.get("/google-drive", response_model=ChallengeResponse)
async def verify_google_drive_webhook(
    challenge: str | None = None,
    verification_token: str | None = None,
    settings: Settings = Depends(get_settings),
):
    """Echo the challenge when the shared verification token matches."""
    if verification_token != settings.google_webhook_verification_token:
        logger.warning("Rejected Drive webhook verification: token mismatch")
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={"error": "Invalid verification token"},
        )
    return ChallengeResponse(challenge=challenge)


async def _process_file(
    file_id: str,
    drive_service: DriveService,
    ai_service: AIService,
) -> bool:
    """Run extraction for one notified file; failures are logged, not raised."""
    try:
        metadata = await extract_drive_file(file_id, drive_service, ai_service)
    except Exception as e:
        logger.error("Error processing file %s: %s", file_id, e)
        return False
    logger.info("Successfully extracted file %s: %r", file_id, metadata.title[:80])
    return True


@router.post(
    "/google-drive",
    response_model=WebhookResponse,
    response_model_exclude_none=True,
)
async def handle_google_drive_webhook(
    request: Request,
    ai_service: AIService = Depends(get_ai_service),
    drive_service: DriveService = Depends(get_drive_service),
):
    """
    Handle a Google Drive change notification.

    A ``sync`` resource state is acknowledged without work. Otherwise every
    id in ``changed`` is extracted concurrently; one file failing never
    aborts the others.
    """
    try:
        # The channel id is read for logging only and is not checked
        # against a registered channel.
        channel_id = request.headers.get("x-goog-channel-id")
        resource_state = request.headers.get("x-goog-resource-state")

        if resource_state == "sync":
            logger.info("Google Drive webhook sync received")
            return WebhookResponse(message="Sync received")

        body = await request.json()
        changed = body.get("changed") if isinstance(body, dict) else None

        logger.info(
            "Google Drive webhook notification: channel=%s resource=%s state=%s changed=%s",
            channel_id,
            request.headers.get("x-goog-resource-id"),
            resource_state,
            changed,
        )

        file_ids = changed or []
        if not isinstance(file_ids, list) or not all(
            isinstance(file_id, str) for file_id in file_ids
        ):
            logger.warning("Rejected Drive webhook: malformed changed list %r", changed)
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"error": "'changed' must be a list of file ids"},
            )
        if not file_ids:
            return WebhookResponse(message="No files to process")

        results = await asyncio.gather(
            *(_process_file(file_id, drive_service, ai_service) for file_id in file_ids),
            return_exceptions=True,
        )
        succeeded = sum(1 for result in results if result is True)

        logger.info(
            "Drive webhook processed: %d/%d file(s) extracted",
            succeeded,
            len(file_ids),
        )
        return WebhookResponse(
            message="Webhook processed successfully",
            processed_files=len(file_ids),
            succeeded_files=succeeded,
        )

    except Exception:
        logger.exception("Error processing Google Drive webhook")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )
