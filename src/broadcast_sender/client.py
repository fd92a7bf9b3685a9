"""AddMessage broadcast publisher."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict

import requests

from .types import SendError, TimeWindow

logger = logging.getLogger(__name__)

ADD_MESSAGE_PATH = "api/services/SysBroadcastMessageServices/SysBroadcastMessageService/AddMessage"
DRY_RUN_MESSAGE_ID = "dryrun-broadcast-1"


def build_endpoint(base_url: str) -> str:
    return f"{base_url.rstrip('/')}/{ADD_MESSAGE_PATH}"


def build_payload(window: TimeWindow) -> Dict[str, Any]:
    return {
        "request": {
            "FromDateTime": window.start,
            "ToDateTime": window.end,
        }
    }


def _parse_message_id(res: requests.Response) -> Any:
    body = (res.text or "").strip()
    if not body:
        raise SendError(f"AddMessage returned an empty body (HTTP {res.status_code})", res.status_code)
    try:
        message_id = res.json()
    except ValueError:
        if body.startswith("<"):
            raise SendError(f"AddMessage returned markup instead of a message id: {body[:400]}", res.status_code)
        return body
    # Only a JSON string or number is an id.
    if isinstance(message_id, bool) or not isinstance(message_id, (str, int, float)):
        raise SendError(f"AddMessage returned no message id: {body[:400]}", res.status_code)
    return message_id


class BroadcastClient:
    def __init__(self, timeout_seconds: float = 20) -> None:
        self.timeout_seconds = timeout_seconds

    def send(self, base_url: str, token: str, window: TimeWindow, dry_run: bool = False) -> Any:
        """POSTs the window to AddMessage and returns the message id from the response."""
        endpoint = build_endpoint(base_url)
        payload = build_payload(window)

        if dry_run:
            logger.info("Dry run, not sending to %s: %s", endpoint, json.dumps(payload))
            return DRY_RUN_MESSAGE_ID

        logger.info("Sending broadcast %s -> %s (%s) to %s", window.start, window.end, window.timezone, endpoint)
        try:
            res = requests.post(
                endpoint,
                json=payload,
                headers={
                    "Authorization": f"Bearer {token}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout_seconds,
                allow_redirects=False,
            )
        except requests.RequestException as exc:
            raise SendError(f"AddMessage request to {endpoint} failed: {exc}") from exc

        if not 200 <= res.status_code < 300:
            body = (res.text or "").strip()
            raise SendError(f"AddMessage failed HTTP {res.status_code}: {body[:400]}", res.status_code)
        return _parse_message_id(res)
