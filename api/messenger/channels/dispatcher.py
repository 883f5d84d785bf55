"""Webhook delivery: adapt, submit, and POST."""

import logging
from typing import Optional

from messenger.channels import WebhookTarget, WireRequest
from messenger.channels.adapter import adapt_all
from messenger.config import settings
from messenger.message import MessageRecord
from messenger.security import safe_http_client

logger = logging.getLogger(__name__)


def dispatch(record: MessageRecord, target: WebhookTarget, submitter) -> int:
    """
    Adapt a record for its target and hand every request to the submitter.

    Returns the number of requests submitted. Never waits on the network.
    """
    requests = adapt_all(record, target)
    for request in requests:
        submitter.submit(request)
    logger.info(
        "Submitted %d %s notification(s) for project %s",
        len(requests), record.kind.value, record.project.id,
    )
    return len(requests)


async def deliver(
    request: WireRequest,
    verify_ssl: Optional[bool] = None,
    timeout: Optional[float] = None,
) -> None:
    """
    POST a single request.

    Transport failures are logged with the target URL and swallowed; a
    non-success status is logged as a warning. Nothing is retried.
    """
    verify_ssl = settings.messenger_verify_ssl if verify_ssl is None else verify_ssl
    timeout = settings.delivery_timeout if timeout is None else timeout
    try:
        async with safe_http_client(
            timeout=timeout,
            verify_ssl=verify_ssl,
            block_private_hosts=settings.block_private_hosts,
        ) as client:
            response = await client.post(
                request.url,
                headers=request.headers,
                content=request.body,
            )

            if response.status_code >= 400:
                logger.warning(
                    "Webhook %s returned status %s: %s",
                    request.url, response.status_code, response.text[:200],
                )
            else:
                logger.debug("Delivered notification to %s (%s)", request.url, response.status_code)

    except Exception as e:
        logger.error("Cannot deliver notification to %s: %s", request.url, e, exc_info=True)
