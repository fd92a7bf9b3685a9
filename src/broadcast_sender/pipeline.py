"""Authenticate, compute the window and send one broadcast message."""

from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from typing import Callable

from .auth import AzureADTokenProvider, TokenProvider
from .client import BroadcastClient
from .config import BroadcastOptions
from .time_window import compute_time_window
from .types import BroadcastError, BroadcastResult, Credentials

logger = logging.getLogger(__name__)


def send_broadcast_message(
    options: BroadcastOptions,
    credentials: Credentials,
    *,
    token_provider: TokenProvider | None = None,
    client: BroadcastClient | None = None,
    local_tz: tzinfo | None = None,
    now: Callable[[], datetime] | None = None,
) -> BroadcastResult:
    """Runs the whole flow and reports failures as a result instead of raising.

    The time zone is resolved before any network call, and a failed token
    request stops the flow before AddMessage is called.
    """
    token_provider = token_provider or AzureADTokenProvider(
        authority=options.authority,
        timeout_seconds=options.timeout_seconds,
    )
    client = client or BroadcastClient(timeout_seconds=options.timeout_seconds)

    window = None
    try:
        window = compute_time_window(
            options.timezone,
            options.start_time,
            options.ending_in_minutes,
            local_tz=local_tz,
            now=now,
        )
        logger.info("Broadcast window %s -> %s (%s)", window.start, window.end, window.timezone)

        if options.dry_run:
            message_id = client.send(options.url, "", window, dry_run=True)
            return BroadcastResult.success(message_id, window, dry_run=True)

        token = token_provider.get_token(credentials, options.token_resource)
        message_id = client.send(options.url, token, window)
    except BroadcastError as exc:
        logger.error("Broadcast %s error: %s", exc.kind, exc)
        return BroadcastResult.failure(exc.kind, str(exc), window=window)

    logger.info("Broadcast message created: %s", message_id)
    return BroadcastResult.success(message_id, window)
