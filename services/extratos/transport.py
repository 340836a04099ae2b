from __future__ import annotations

import logging

import httpx

from services.extratos.errors import ConnectivityError, TransportError, UnknownError
from services.extratos.packaging import MultipartPayload

logger = logging.getLogger(__name__)


def post_submission(
    payload: MultipartPayload, url: str, client: httpx.Client | None = None
) -> str:
    """Single POST of the multipart payload; returns the raw body text on 2xx.

    No retry and no explicit timeout: whatever httpx defaults to applies.
    """
    owns_client = client is None
    client = client or httpx.Client()
    try:
        logger.info("posting %d file(s) to webhook %s", len(payload.files), url)
        r = client.post(url, data=payload.data, files=payload.files or None)
    except httpx.TransportError as e:
        logger.warning("webhook unreachable: %s", e)
        raise ConnectivityError() from e
    except Exception as e:  # noqa: BLE001
        logger.exception("unexpected error posting to webhook")
        raise UnknownError(str(e) or None) from e
    finally:
        if owns_client:
            client.close()

    logger.info("webhook answered %s", r.status_code)
    if not r.is_success:
        raise TransportError(r.status_code, r.reason_phrase)
    return r.text
