"""PagerDuty Events API v2 client with an on-disk spool for deferred events.

Public API:
- EventsAgent
- SubmitResult / SubmitStatus
- FlushResult
"""

from __future__ import annotations

import http.client
import itertools
import json
import logging
import os
import socket
import time
import urllib.error
import urllib.request
import uuid
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

EVENTS_API_URL = "https://events.pagerduty.com/v2/enqueue"

SEVERITIES = ("critical", "error", "warning", "info")

_spool_sequence = itertools.count()


class SubmitStatus(str, Enum):
    SUCCESS = "success"
    DEFERRED = "deferred"
    FAILED = "failed"


@dataclass
class SubmitResult:
    """Outcome of a single event submission."""

    status: SubmitStatus
    dedup_key: str = ""
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status == SubmitStatus.SUCCESS

    @property
    def deferred(self) -> bool:
        return self.status == SubmitStatus.DEFERRED


@dataclass
class FlushResult:
    """Counts from draining the spool directory."""

    submitted: int = 0
    failed: int = 0
    deferred: int = 0


class EventsAgent:
    """
    Submit trigger/acknowledge/resolve events to PagerDuty.

    Rate limiting (HTTP 429), server errors (5xx) and connection failures
    defer the event. Deferred events are written to ``spool`` when it is set
    and dropped otherwise; ``flush()`` resubmits spooled events.
    """

    def __init__(
        self,
        routing_key: str,
        spool: Optional[str | Path] = None,
        api_url: str = EVENTS_API_URL,
        timeout: int = 30,
    ):
        self.routing_key = routing_key or ""
        self.spool = Path(spool) if spool else None
        self.api_url = api_url
        self.timeout = timeout

    def trigger_event(
        self,
        dedup_key: str,
        summary: str,
        source: str,
        severity: str,
        event_class: Optional[str] = None,
        component: Optional[str] = None,
        group: Optional[str] = None,
        custom_details: Optional[dict[str, Any]] = None,
        links: Optional[list[dict[str, str]]] = None,
    ) -> SubmitResult:
        """Raise (or re-raise) the incident identified by dedup_key."""
        payload: dict[str, Any] = {
            "summary": summary,
            "source": source,
            "severity": severity,
        }
        if event_class:
            payload["class"] = event_class
        if component:
            payload["component"] = component
        if group:
            payload["group"] = group
        if custom_details:
            payload["custom_details"] = custom_details

        event = self._event("trigger", dedup_key)
        event["payload"] = payload
        if links:
            event["links"] = links
        return self.submit(event)

    def acknowledge_event(self, dedup_key: str, summary: Optional[str] = None) -> SubmitResult:
        """Acknowledge the incident identified by dedup_key."""
        return self.submit(self._event("acknowledge", dedup_key, summary))

    def resolve_event(self, dedup_key: str, summary: Optional[str] = None) -> SubmitResult:
        """Resolve the incident identified by dedup_key."""
        return self.submit(self._event("resolve", dedup_key, summary))

    def _event(
        self, event_action: str, dedup_key: str, summary: Optional[str] = None
    ) -> dict[str, Any]:
        event: dict[str, Any] = {
            "routing_key": self.routing_key,
            "event_action": event_action,
            "dedup_key": dedup_key,
        }
        # PagerDuty ignores the payload of acknowledge/resolve events.
        if summary:
            event["payload"] = {"summary": summary}
        return event

    def submit(self, event: dict[str, Any]) -> SubmitResult:
        """Post an event, spooling it if PagerDuty defers the submission."""
        result = self._post(event)
        if result.deferred:
            return self._defer(event, result.message)
        return result

    def _post(self, event: dict[str, Any]) -> SubmitResult:
        if not event.get("routing_key"):
            return SubmitResult(SubmitStatus.FAILED, message="No PagerDuty routing key configured")

        request = urllib.request.Request(
            self.api_url,
            data=json.dumps(event).encode("utf-8"),
            headers={"Content-Type": "application/json"},
            method="POST",
        )

        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                response_body = response.read().decode("utf-8")
        except urllib.error.HTTPError as e:
            error_body = e.read().decode("utf-8") if e.fp else str(e)
            error_msg = _error_message(error_body)
            if e.code == 429 or e.code >= 500:
                logger.warning(f"PagerDuty deferred event (HTTP {e.code}): {error_msg}")
                return SubmitResult(
                    SubmitStatus.DEFERRED,
                    message=f"PagerDuty API error ({e.code}): {error_msg}",
                )
            logger.error(f"PagerDuty HTTP error {e.code}: {error_body}")
            return SubmitResult(
                SubmitStatus.FAILED,
                message=f"PagerDuty API error ({e.code}): {error_msg}",
            )
        except urllib.error.URLError as e:
            logger.warning(f"PagerDuty URL error: {e.reason}")
            return SubmitResult(
                SubmitStatus.DEFERRED,
                message=f"Failed to connect to PagerDuty: {e.reason}",
            )
        except (socket.timeout, TimeoutError) as e:
            logger.warning(f"PagerDuty request timed out: {e}")
            return SubmitResult(
                SubmitStatus.DEFERRED,
                message=f"Timed out connecting to PagerDuty: {e}",
            )
        except (OSError, http.client.HTTPException) as e:
            logger.warning(f"PagerDuty connection error: {e!r}")
            return SubmitResult(
                SubmitStatus.DEFERRED,
                message=f"Failed to connect to PagerDuty: {e!r}",
            )

        try:
            response_data = json.loads(response_body)
        except json.JSONDecodeError:
            response_data = None
        if not isinstance(response_data, dict):
            return SubmitResult(
                SubmitStatus.FAILED,
                message=f"Unparseable response from PagerDuty: {response_body[:200]}",
            )

        if response_data.get("status") == "success":
            dedup_key = response_data.get("dedup_key") or event.get("dedup_key", "")
            return SubmitResult(
                SubmitStatus.SUCCESS,
                dedup_key=dedup_key,
                message=response_data.get("message", ""),
            )

        return SubmitResult(
            SubmitStatus.FAILED,
            message=f"PagerDuty error: {response_data.get('message', 'Unknown error')}",
        )

    def _defer(self, event: dict[str, Any], message: str) -> SubmitResult:
        if self.spool is None:
            return SubmitResult(
                SubmitStatus.DEFERRED,
                dedup_key=event.get("dedup_key", ""),
                message=f"{message} (no spool directory configured, event dropped)",
            )

        try:
            path = self._spool_event(event)
        except OSError as e:
            logger.error(f"Failed to spool PagerDuty event to {self.spool}: {e}")
            return SubmitResult(
                SubmitStatus.FAILED,
                dedup_key=event.get("dedup_key", ""),
                message=f"{message}; spooling failed: {e}",
            )

        logger.info(f"Spooled deferred PagerDuty event to {path}")
        return SubmitResult(
            SubmitStatus.DEFERRED,
            dedup_key=event.get("dedup_key", ""),
            message=f"{message} (spooled for retry)",
        )

    def _spool_event(self, event: dict[str, Any]) -> Path:
        self.spool.mkdir(parents=True, exist_ok=True)
        name = f"{time.time_ns():020d}-{next(_spool_sequence):08d}-{uuid.uuid4().hex}"
        tmp_path = self.spool / f".{name}.tmp"
        final_path = self.spool / f"{name}.json"
        with open(tmp_path, "w", encoding="utf-8") as fh:
            json.dump(event, fh)
        os.replace(tmp_path, final_path)
        return final_path

    def spooled_events(self) -> list[Path]:
        """Spooled event files, oldest first."""
        if self.spool is None or not self.spool.is_dir():
            return []
        return sorted(self.spool.glob("*.json"))

    def flush(self) -> FlushResult:
        """Resubmit spooled events in the order they were deferred.

        Delivered and permanently rejected events are removed. The first
        deferral stops the flush so ordering per dedup key is preserved.
        """
        result = FlushResult()

        for path in self.spooled_events():
            try:
                with open(path, encoding="utf-8") as fh:
                    event = json.load(fh)
            except (OSError, json.JSONDecodeError) as e:
                logger.error(f"Dropping unreadable spool file {path}: {e}")
                path.unlink(missing_ok=True)
                result.failed += 1
                continue

            # Events spooled without a key pick up the configured one.
            if not event.get("routing_key"):
                event["routing_key"] = self.routing_key

            outcome = self._post(event)
            if outcome.deferred:
                result.deferred = len(self.spooled_events())
                logger.info(f"PagerDuty still deferring: {outcome.message}")
                break

            path.unlink(missing_ok=True)
            if outcome.ok:
                result.submitted += 1
            else:
                logger.error(f"Dropping spooled PagerDuty event {path.name}: {outcome.message}")
                result.failed += 1

        return result


def _error_message(error_body: str) -> str:
    try:
        error_data = json.loads(error_body)
    except json.JSONDecodeError:
        return error_body
    if not isinstance(error_data, dict):
        return error_body
    message = error_data.get("message", error_body)
    errors = error_data.get("errors")
    if errors:
        message = f"{message}: {'; '.join(str(e) for e in errors)}"
    return message
