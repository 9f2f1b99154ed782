"""
Identity Verification Status Poller

Polls Paxos for an identity's verification status until it reaches
APPROVED or DENIED. Poll failures are treated as "still pending".
"""
import logging
import threading
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from django.conf import settings

from apps.core.constants import TERMINAL_VERIFICATION_STATUSES, VerificationStatus
from apps.core.exceptions import ExternalServiceError, TransientPollError
from apps.paxos import services as paxos_services

from .denial import DEFAULT_DENIAL_DETAILS, DEFAULT_DENIAL_REASON, DenialInfo

logger = logging.getLogger(__name__)


def _summary(payload: dict) -> dict:
    summary = payload.get('summary')
    return summary if isinstance(summary, dict) else {}


def extract_verification_status(payload: dict | None) -> str:
    """
    Read the verification status from an identity payload.

    Looks at `status`, then `summary.status`, then `summary_status`; defaults
    to PENDING. Unrecognised values also count as PENDING.
    """
    if not payload:
        return VerificationStatus.PENDING.value
    status = (
        payload.get('status')
        or _summary(payload).get('status')
        or payload.get('summary_status')
        or VerificationStatus.PENDING.value
    )
    status = str(status).upper()
    if status not in VerificationStatus.values:
        return VerificationStatus.PENDING.value
    return status


def extract_denial(payload: dict | None) -> DenialInfo:
    payload = payload or {}
    summary = _summary(payload)
    details = summary.get('details') or payload.get('details')
    return DenialInfo(
        reason=summary.get('reason') or payload.get('reason') or DEFAULT_DENIAL_REASON,
        details=details if isinstance(details, str) and details else DEFAULT_DENIAL_DETAILS,
    )


def fetch_identity_status(identity_id: str) -> dict:
    """
    Identity payload for one poll.

    Raises:
        TransientPollError: Paxos could not be reached or answered with an
            unreadable body
        ExternalServiceError: Paxos answered with an error status
    """
    try:
        return paxos_services.get_identity(identity_id)
    except ExternalServiceError as e:
        if e.upstream_status is None:
            raise TransientPollError(e.message) from e
        raise


@dataclass(frozen=True)
class PollResult:
    status: str
    payload: dict = field(default_factory=dict)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_VERIFICATION_STATUSES


class PollHandle:
    """Handle to a running background poll. cancel() stops it at the next wait."""

    def __init__(self, thread: threading.Thread, stop_event: threading.Event):
        self._thread = thread
        self._stop_event = stop_event

    def cancel(self) -> None:
        self._stop_event.set()

    def wait(self, timeout: float | None = None) -> None:
        self._thread.join(timeout)

    @property
    def is_running(self) -> bool:
        return self._thread.is_alive()

    @property
    def cancelled(self) -> bool:
        return self._stop_event.is_set()


class StatusPoller:
    """
    Usage:
        poller = StatusPoller(lambda: fetch_identity_status(identity_id), on_denied=show_denial)
        handle = poller.start()
        ...
        handle.cancel()
    """

    def __init__(
        self,
        fetch_status: Callable[[], dict],
        interval: float | None = None,
        on_approved: Callable[[dict], None] | None = None,
        on_denied: Callable[[dict], None] | None = None,
        on_status: Callable[[str, dict], None] | None = None,
    ):
        self.fetch_status = fetch_status
        self.interval = settings.ONBOARDING_POLL_INTERVAL if interval is None else interval
        self.on_approved = on_approved
        self.on_denied = on_denied
        self.on_status = on_status
        self.last_result: PollResult | None = None
        self._stop_event = threading.Event()

    def check_now(self) -> PollResult:
        """
        One poll. Network failures are swallowed and reported as PENDING.

        Safe to call while a scheduled poll is running; both only read.
        """
        try:
            payload = self.fetch_status() or {}
        except (TransientPollError, ExternalServiceError) as e:
            logger.debug(f'Status poll failed, staying pending: {e}')
            result = PollResult(VerificationStatus.PENDING.value)
            self.last_result = result
            return result

        result = PollResult(extract_verification_status(payload), payload)
        self.last_result = result

        if self.on_status is not None:
            self.on_status(result.status, payload)
        if result.status == VerificationStatus.APPROVED and self.on_approved is not None:
            self.on_approved(payload)
        elif result.status == VerificationStatus.DENIED and self.on_denied is not None:
            self.on_denied(payload)
        return result

    poll_once = check_now

    def start(self) -> PollHandle:
        """Poll every `interval` seconds on a daemon thread until terminal or cancelled."""
        self._stop_event = threading.Event()
        stop_event = self._stop_event

        def run():
            while not stop_event.is_set():
                if self.check_now().is_terminal:
                    break
                stop_event.wait(self.interval)
            logger.debug('Status poller stopped')

        thread = threading.Thread(target=run, name='onboarding-status-poller', daemon=True)
        thread.start()
        return PollHandle(thread, stop_event)

    def cancel(self) -> None:
        self._stop_event.set()

    def iter_statuses(self, max_duration: float | None = None) -> Iterator[PollResult]:
        """
        Yield each poll result, stopping after a terminal status, after
        `max_duration` seconds, or when cancelled. Closing the generator
        cancels the poller.
        """
        started = time.monotonic()
        self._stop_event = threading.Event()
        try:
            while not self._stop_event.is_set():
                result = self.check_now()
                yield result
                if result.is_terminal:
                    return
                if max_duration is not None and time.monotonic() - started >= max_duration:
                    return
                self._stop_event.wait(self.interval)
        finally:
            self._stop_event.set()
