"""
L3 Detection — Published version lookup.

Fetches the single plaintext version resource that backs the version
badge. The lookup is never allowed to stall or fail a caller:

- ``VersionResolver.current`` answers immediately (sentinel until a
  fetch lands).
- ``VersionResolver.start()`` runs the fetch on a daemon thread and
  returns a cancellable handle.
- ``VersionResolver.resolve(timeout)`` waits at most ``timeout``
  seconds and then returns whatever is known.

Any timeout, non-2xx status, empty or malformed body, or network error
is a ``NetworkFailure`` and is recovered to the sentinel.
"""

from __future__ import annotations

import logging
import re
import threading
import urllib.error
import urllib.request
from collections.abc import Callable
from datetime import UTC, datetime

from mato_installer import __version__
from mato_installer.core.models.version import UNKNOWN_VERSION, VersionQuery
from mato_installer.core.services.install.errors import NetworkFailure

logger = logging.getLogger(__name__)

SEMVER_RE = re.compile(
    r"^v?(\d+\.\d+\.\d+(?:-[0-9A-Za-z.-]+)?(?:\+[0-9A-Za-z.-]+)?)$"
)

_MAX_BODY_BYTES = 256

Fetcher = Callable[[str, float], str]


def fetch_published_version(url: str, timeout: float) -> str:
    """GET ``url`` and return the trimmed semantic version it contains.

    Raises:
        NetworkFailure: On any transport, status or content problem.
    """
    try:
        req = urllib.request.Request(
            url,
            headers={
                "Cache-Control": "no-store",
                "User-Agent": f"mato-installer/{__version__}",
            },
        )
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            status = resp.getcode()
            body = resp.read(_MAX_BODY_BYTES + 1)
    except urllib.error.HTTPError as exc:
        raise NetworkFailure(f"HTTP {exc.code} from {url}") from exc
    except (urllib.error.URLError, TimeoutError, OSError, ValueError) as exc:
        raise NetworkFailure(f"Cannot fetch {url}: {exc}") from exc

    if status is None or not 200 <= status < 300:
        raise NetworkFailure(f"HTTP {status} from {url}")
    if len(body) > _MAX_BODY_BYTES:
        raise NetworkFailure(f"Version body from {url} is too large")

    try:
        text = body.decode("utf-8").strip()
    except UnicodeDecodeError as exc:
        raise NetworkFailure(f"Version body from {url} is not UTF-8") from exc

    if not text:
        raise NetworkFailure(f"Empty version body from {url}")
    match = SEMVER_RE.match(text)
    if not match:
        raise NetworkFailure(f"Malformed version '{text[:40]}' from {url}")
    return match.group(1)


def release_url(version: str, repository: str) -> str:
    """Release page for ``version``; the latest release for the sentinel."""
    base = f"https://github.com/{repository}/releases"
    if version == UNKNOWN_VERSION:
        return f"{base}/latest"
    return f"{base}/tag/v{version}"


class VersionFetch:
    """Handle for one background fetch."""

    def __init__(self) -> None:
        self.value: str | None = None
        self.error: str | None = None
        self._done = threading.Event()
        self._cancelled = threading.Event()

    @property
    def done(self) -> bool:
        return self._done.is_set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        """Discard the result when it arrives. The request itself is not aborted."""
        self._cancelled.set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block up to ``timeout`` seconds; True if the fetch finished."""
        return self._done.wait(timeout)

    def _finish(self) -> None:
        self._done.set()


class VersionResolver:
    """Non-blocking, re-triggerable published-version lookup.

    The only state shared between fetches is the last resolved
    ``VersionQuery``, used for display.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 3.0,
        fetcher: Fetcher = fetch_published_version,
    ):
        self.url = url
        self.timeout = timeout
        self._fetcher = fetcher
        self._lock = threading.Lock()
        self._query = VersionQuery(source=url)

    @property
    def current(self) -> VersionQuery:
        """Last known result; the sentinel until a fetch succeeds."""
        with self._lock:
            return self._query

    def start(self) -> VersionFetch:
        """Launch a fetch on a daemon thread and return its handle."""
        handle = VersionFetch()
        t = threading.Thread(
            target=self._fetch_into,
            args=(handle,),
            daemon=True,
            name="version-resolver",
        )
        t.start()
        return handle

    def resolve(self, timeout: float | None = None) -> str:
        """Fetch and wait at most ``timeout`` seconds (default: the resolver timeout).

        Returns:
            The version this fetch resolved, or ``"unknown"`` when it
            failed or exceeded the bound.
        """
        bound = self.timeout if timeout is None else timeout
        handle = self.start()
        if not handle.wait(bound):
            handle.cancel()
            logger.info("Version lookup exceeded %.1fs — using '%s'", bound, UNKNOWN_VERSION)
            return UNKNOWN_VERSION
        return handle.value or UNKNOWN_VERSION

    def _fetch_into(self, handle: VersionFetch) -> None:
        try:
            value = self._fetcher(self.url, self.timeout)
        except NetworkFailure as exc:
            logger.info("Published version unavailable: %s", exc)
            self._apply(handle, None, str(exc))
        except Exception as exc:
            logger.exception("Unexpected error resolving published version")
            self._apply(handle, None, str(exc))
        else:
            logger.debug("Published version %s from %s", value, self.url)
            self._apply(handle, value, None)
        finally:
            handle._finish()

    def _apply(self, handle: VersionFetch, value: str | None, error: str | None) -> None:
        handle.value, handle.error = value, error
        if handle.cancelled:
            return
        now = datetime.now(UTC).isoformat()
        with self._lock:
            if value is not None:
                self._query = VersionQuery(source=self.url, value=value, resolved_at=now)
            else:
                # keep the last good value for display, remember why this one failed
                self._query = self._query.model_copy(
                    update={"error": error, "resolved_at": now}
                )
