"""Client for the external usage-tracking service.

Callers use the recorder after a calculation to report what was billed, and to
read back usage statistics. The pricing engine never calls it, so a slow or
failing usage service cannot change a cost breakdown.
"""

import os
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests

from .config_paths import ENV_USAGE_API_KEY, ENV_USAGE_API_URL
from .errors import ConfigurationError, InvalidInputError, NetworkError
from .logging import LogEvent, log_debug, log_warning

DEFAULT_BASE_URL = "https://api.usagey.com"
DEFAULT_TIMEOUT = 30

TRACK_ENDPOINT = "/v1/usage/track"
STATS_ENDPOINT = "/v1/usage/stats"
EVENTS_ENDPOINT = "/v1/usage/events"


@dataclass(frozen=True)
class RecordedEvent:
    """Acknowledgement returned by the usage service for a tracked event."""

    event_id: str
    timestamp: str
    usage: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_response(cls, payload: Dict[str, Any]) -> "RecordedEvent":
        """Build the acknowledgement from a JSON response body."""
        event_id = payload.get("event_id") or payload.get("eventId")
        timestamp = payload.get("timestamp")
        if not event_id or not timestamp:
            raise ValueError("response is missing 'event_id' or 'timestamp'")
        usage = payload.get("usage")
        return cls(event_id=str(event_id), timestamp=str(timestamp), usage=dict(usage or {}))


class UsageEventRecorder:
    """HTTP client for recording usage events and reading usage data."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
        max_workers: int = 2,
    ) -> None:
        """Initialize the recorder.

        Args:
            api_key: Usage service API key, sent as a bearer token
            base_url: Base URL of the usage service
            timeout: Per-request timeout in seconds
            session: Optional pre-configured requests session
            max_workers: Threads used by record_event_async
        """
        if not api_key:
            raise ConfigurationError("Usage service API key is empty")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
        )
        self._max_workers = max_workers
        self._executor: Optional[ThreadPoolExecutor] = None
        self._executor_lock = threading.Lock()

    @classmethod
    def from_env(cls, **kwargs: Any) -> "UsageEventRecorder":
        """Create a recorder from PMR_USAGE_API_KEY and PMR_USAGE_API_URL.

        Raises:
            ConfigurationError: If PMR_USAGE_API_KEY is not set
        """
        api_key = os.getenv(ENV_USAGE_API_KEY)
        if not api_key:
            raise ConfigurationError(
                f"Usage service API key is not defined. Please set the {ENV_USAGE_API_KEY} environment variable."
            )
        base_url = os.getenv(ENV_USAGE_API_URL) or DEFAULT_BASE_URL
        return cls(api_key, base_url=base_url, **kwargs)

    def _request(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}{endpoint}"
        log_debug(LogEvent.USAGE_EVENT, "Usage service request", method=method, url=url)
        try:
            response = self._session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            log_warning(LogEvent.USAGE_EVENT, "Usage service unreachable", url=url, error=str(e))
            raise NetworkError(f"Failed to reach usage service: {e}", url=url) from e

        if not response.ok:
            message = f"Usage service returned HTTP {response.status_code}"
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and body.get("error"):
                message = str(body["error"])
            log_warning(
                LogEvent.USAGE_EVENT,
                "Usage service request failed",
                url=url,
                status=response.status_code,
                error=message,
            )
            raise NetworkError(message, url=url, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise NetworkError(
                f"Usage service returned invalid JSON: {e}",
                url=url,
                status_code=response.status_code,
            ) from e

    def record_event(
        self,
        event_type: str,
        quantity: float = 1,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> RecordedEvent:
        """Record a usage event.

        Args:
            event_type: Event name, e.g. "billing_simulation"
            quantity: Units consumed by the event
            metadata: Optional JSON-serializable details

        Returns:
            RecordedEvent with the service-assigned id and timestamp

        Raises:
            InvalidInputError: If event_type is empty
            NetworkError: If the request fails or the response is malformed
        """
        if not event_type:
            raise InvalidInputError("Event type is required", param_name="event_type", value=event_type)

        payload = {"event_type": event_type, "quantity": quantity, "metadata": metadata or {}}
        data = self._request("POST", TRACK_ENDPOINT, json=payload)
        try:
            event = RecordedEvent.from_response(data if isinstance(data, dict) else {})
        except ValueError as e:
            raise NetworkError(f"Unexpected usage service response: {e}", url=self.base_url + TRACK_ENDPOINT) from e
        log_debug(LogEvent.USAGE_EVENT, "Usage event recorded", event_type=event_type, event_id=event.event_id)
        return event

    def record_event_async(
        self,
        event_type: str,
        quantity: float = 1,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "Future[RecordedEvent]":
        """Submit record_event to a background thread and return its future.

        Failures are logged and stay inside the returned future.
        """
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._max_workers,
                    thread_name_prefix="pmr-usage",
                )
            future = self._executor.submit(self.record_event, event_type, quantity, metadata)

        def _log_failure(done: "Future[RecordedEvent]") -> None:
            error = done.exception()
            if error is not None:
                log_warning(
                    LogEvent.USAGE_EVENT,
                    "Background usage event failed",
                    event_type=event_type,
                    error=str(error),
                )

        future.add_done_callback(_log_failure)
        return future

    def get_usage_stats(self) -> Dict[str, Any]:
        """Fetch aggregate usage statistics.

        Raises:
            NetworkError: If the request fails
        """
        data = self._request("GET", STATS_ENDPOINT)
        return data if isinstance(data, dict) else {"stats": data}

    def get_usage_events(
        self,
        event_type: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Any:
        """Fetch recent usage events, filtered by the given options.

        Only options that are set are sent as query parameters.

        Raises:
            InvalidInputError: If limit is not positive
            NetworkError: If the request fails
        """
        if limit is not None and limit <= 0:
            raise InvalidInputError("limit must be a positive integer", param_name="limit", value=limit)

        params = {
            key: value
            for key, value in {
                "eventType": event_type,
                "startDate": start_date,
                "endDate": end_date,
                "limit": limit,
            }.items()
            if value is not None
        }
        return self._request("GET", EVENTS_ENDPOINT, params=params)

    def close(self, wait: bool = True) -> None:
        """Shut down the background pool and the HTTP session."""
        with self._executor_lock:
            if self._executor is not None:
                self._executor.shutdown(wait=wait)
                self._executor = None
        self._session.close()

    def __enter__(self) -> "UsageEventRecorder":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
