# File: academy_scheduler/services/session_store.py

import abc
import asyncio
import datetime
from typing import Any, Dict, List, Optional

import pytz
import requests

from academy_scheduler.core.config_manager import Config
from academy_scheduler.core.exceptions import (
    SchedulingError, TransientStoreError, MutationRejectedError, SessionNotFoundError
)
from academy_scheduler.utils.logger import setup_logger
from academy_scheduler.models import (
    SessionRecord, SessionFilter, VacationPeriod, MutationResult,
    session_from_dict, vacation_from_dict, format_date, format_time
)

logger = setup_logger(__name__)


class SessionStore(abc.ABC):
    """
    Contract of the system of record for class sessions.

    Reads raise SchedulingError subclasses. Mutations never raise for store-side
    failures: they report them through MutationResult.
    """

    @abc.abstractmethod
    async def list_sessions(self, session_filter: Optional[SessionFilter] = None) -> List[SessionRecord]:
        """Fetch session records matching the filter."""

    @abc.abstractmethod
    async def reschedule_session(
        self,
        session_id: str,
        new_start_date: datetime.date,
        new_start_time: datetime.time,
        reason: Optional[str] = None
    ) -> MutationResult:
        """Atomically move a session to a new start date/time."""

    @abc.abstractmethod
    async def cancel_session(self, session_id: str, reason: Optional[str] = None) -> MutationResult:
        """Set a session's status to Cancelled."""

    @abc.abstractmethod
    async def list_vacation_periods(self, instructor_id: str) -> List[VacationPeriod]:
        """Fetch an instructor's vacation periods."""


def result_from_error(error: SchedulingError) -> MutationResult:
    """Fold a store error into a failed MutationResult."""
    return MutationResult.fail(str(error), retryable=isinstance(error, TransientStoreError))


def _unwrap(payload: Any) -> List[dict]:
    """Backend lists come either bare or wrapped in {'data': [...]}."""
    if payload is None:
        return []
    if isinstance(payload, dict):
        payload = payload.get('data', payload.get('items', []))
    return list(payload or [])


class RestSessionStore(SessionStore):
    """Session store backed by the academy REST API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        timezone: Optional[str] = None,
        http: Optional[requests.Session] = None
    ):
        """
        Initialize the REST store.

        Args:
            base_url: API root, e.g. https://api.example.com
            token: Bearer token for the Authorization header
            timeout: Per-request timeout in seconds
            timezone: Timezone whose UTC offset is sent in the 'timezone' header
            http: Pre-configured requests session (tests inject a mock)
        """
        self.base_url = (base_url or Config.API_BASE_URL).rstrip('/')
        self.token = token if token is not None else Config.API_TOKEN
        self.timeout = timeout or Config.REQUEST_TIMEOUT
        self.timezone = timezone or Config.TARGET_TIMEZONE
        self.http = http or requests.Session()

        if not self.base_url:
            raise ValueError("RestSessionStore needs a base URL. Set ACADEMY_API_BASE_URL in .env")

    def _headers(self) -> Dict[str, str]:
        offset = datetime.datetime.now(pytz.timezone(self.timezone)).strftime('%z')
        headers = {
            "Content-Type": "application/json",
            "timezone": f"{offset[:3]}:{offset[3:]}",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    @staticmethod
    def _error_message(response: Optional[requests.Response]) -> str:
        if response is None:
            return "No response from server"
        try:
            body = response.json()
            if isinstance(body, dict) and body.get('message'):
                return str(body['message'])
        except ValueError:
            pass
        return f"HTTP {response.status_code}: {response.text[:200]}"

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, str]] = None,
        body: Optional[Dict[str, Any]] = None,
        decode: bool = True
    ) -> Any:
        """
        Blocking HTTP call. Runs in a worker thread via asyncio.to_thread.

        Mutations pass ``decode=False``: any 2xx means applied, whatever the body.
        """
        url = f"{self.base_url}/{path}"
        logger.debug(f"{method} {url} params={params}")

        try:
            response = self.http.request(
                method, url,
                headers=self._headers(),
                params=params,
                json=body,
                timeout=self.timeout
            )
            response.raise_for_status()
        except requests.exceptions.Timeout as e:
            raise TransientStoreError(f"Request to {path} timed out") from e
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            message = self._error_message(e.response)
            if status == 404:
                raise SessionNotFoundError(message) from e
            if status is not None and (status >= 500 or status == 429):
                raise TransientStoreError(message) from e
            raise MutationRejectedError(message) from e
        except requests.exceptions.RequestException as e:
            raise TransientStoreError(f"Request to {path} failed: {e}") from e

        if not decode or response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise TransientStoreError(f"Response from {path} is not JSON") from e

    async def list_sessions(self, session_filter: Optional[SessionFilter] = None) -> List[SessionRecord]:
        session_filter = session_filter or SessionFilter()
        payload = await asyncio.to_thread(
            self._request, "GET", Config.SESSIONS_PATH, session_filter.to_params()
        )

        records: List[SessionRecord] = []
        for row in _unwrap(payload):
            try:
                records.append(session_from_dict(row))
            except (ValueError, TypeError) as e:
                logger.error(f"Failed to convert session {row.get('title', 'Unknown')}: {e}")

        matched = [r for r in records if session_filter.matches(r)]
        logger.info(f"Fetched {len(matched)} sessions ({len(records)} returned by API)")
        return matched

    async def reschedule_session(
        self,
        session_id: str,
        new_start_date: datetime.date,
        new_start_time: datetime.time,
        reason: Optional[str] = None
    ) -> MutationResult:
        body = {
            "status": "reschedule",
            "start_date": format_date(new_start_date),
            "start_time": format_time(new_start_time),
        }
        if reason:
            body["reason"] = reason

        path = Config.SESSION_PATH.format(session_id=session_id)
        try:
            await asyncio.to_thread(self._request, "PATCH", path, None, body, decode=False)
        except SchedulingError as e:
            logger.warning(f"Reschedule of session {session_id} failed: {e}")
            return result_from_error(e)

        logger.info(f"Session {session_id} rescheduled to {body['start_date']} {body['start_time']}")
        return MutationResult.ok()

    async def cancel_session(self, session_id: str, reason: Optional[str] = None) -> MutationResult:
        body = {"status": "cancelled"}
        if reason:
            body["reason"] = reason

        path = Config.SESSION_PATH.format(session_id=session_id)
        try:
            await asyncio.to_thread(self._request, "PATCH", path, None, body, decode=False)
        except SchedulingError as e:
            logger.warning(f"Cancel of session {session_id} failed: {e}")
            return result_from_error(e)

        logger.info(f"Session {session_id} cancelled")
        return MutationResult.ok()

    async def list_vacation_periods(self, instructor_id: str) -> List[VacationPeriod]:
        path = Config.VACATIONS_PATH.format(instructor_id=instructor_id)
        payload = await asyncio.to_thread(self._request, "GET", path)

        vacations: List[VacationPeriod] = []
        for row in _unwrap(payload):
            row.setdefault('instructor_id', instructor_id)
            try:
                vacations.append(vacation_from_dict(row))
            except (ValueError, TypeError) as e:
                logger.error(f"Failed to convert vacation {row.get('id', 'Unknown')}: {e}")

        logger.info(f"Fetched {len(vacations)} vacation periods for instructor {instructor_id}")
        return vacations
