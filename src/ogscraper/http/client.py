"""HTTP client that caps how much of a response body it will download.

Every request goes through a per-request transfer monitor. Each received
chunk produces a ``DownloadProgress`` that is handed to the registered
progress hooks; a hook may call ``abort(error)`` to stop the transfer. The
download limit itself is just one such hook.

Two response modes are offered:
- buffered: ``await client.request(...)`` reads the whole body and raises on abort
- streaming: ``async with client.stream(...) as s: async for chunk in s`` closes
  the underlying response and raises on abort
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable, List, Mapping, Optional, Union

import aiohttp
from multidict import CIMultiDictProxy

from ..config.settings import get_settings
from ..domain.errors import DownloadLimitExceededError
from ..models.options import transport_defaults
from ..observability.logger import get_logger

logger = get_logger(__name__)


DownloadLimit = Union[int, bool, None]
AbortFn = Callable[[BaseException], None]
ProgressHook = Callable[["DownloadProgress", AbortFn], None]


@dataclass(frozen=True)
class DownloadProgress:
    transferred: int
    total: Optional[int] = None
    complete: bool = False

    @property
    def percent(self) -> float:
        """Fraction received; 0 while the size is unknown, 1 once the body is complete."""
        if self.complete:
            return 1.0
        if self.total:
            return self.transferred / self.total
        return 0.0


@dataclass(frozen=True)
class BufferedResponse:
    url: str
    status: int
    headers: CIMultiDictProxy[str]
    body: bytes
    charset: Optional[str] = None
    content_type: str = ""

    def text(self, errors: str = "replace") -> str:
        return self.body.decode(self.charset or "utf-8", errors=errors)


def has_download_limit(download_limit: DownloadLimit) -> bool:
    return isinstance(download_limit, int) and not isinstance(download_limit, bool)


def download_limit_hook(download_limit: int) -> ProgressHook:
    """Abort once more than ``download_limit`` bytes arrived before the body completed."""

    def hook(progress: DownloadProgress, abort: AbortFn) -> None:
        if progress.transferred > download_limit and progress.percent != 1:
            logger.warning(
                "download_limit_exceeded",
                download_limit=download_limit,
                transferred=progress.transferred,
                total=progress.total,
            )
            abort(DownloadLimitExceededError(download_limit))

    return hook


class _TransferMonitor:
    """Per-request progress bookkeeping. Only the first abort counts."""

    def __init__(self, hooks: List[ProgressHook], total: Optional[int]):
        self._hooks = hooks
        self._total = total
        self.transferred = 0
        self.error: Optional[BaseException] = None

    def abort(self, error: BaseException) -> None:
        if self.error is None:
            self.error = error

    def feed(self, size: int, *, complete: bool = False) -> Optional[BaseException]:
        self.transferred += size
        progress = DownloadProgress(transferred=self.transferred, total=self._total, complete=complete)
        for hook in self._hooks:
            hook(progress, self.abort)
            if self.error is not None:
                break
        return self.error


class BoundedStream:
    """Streaming view of a response whose body is watched by a transfer monitor."""

    def __init__(self, response: aiohttp.ClientResponse, monitor: _TransferMonitor):
        self._response = response
        self._monitor = monitor
        self._error: Optional[BaseException] = None
        self._done = False

    @property
    def url(self) -> str:
        return str(self._response.url)

    @property
    def status(self) -> int:
        return self._response.status

    @property
    def headers(self) -> CIMultiDictProxy[str]:
        return self._response.headers

    @property
    def charset(self) -> Optional[str]:
        return self._response.charset

    @property
    def content_type(self) -> str:
        return self._response.content_type

    @property
    def transferred(self) -> int:
        return self._monitor.transferred

    @property
    def destroyed(self) -> bool:
        return self._error is not None

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self.iter_chunks()

    async def iter_chunks(self) -> AsyncIterator[bytes]:
        if self._error is not None:
            raise self._error
        if self._done:
            return

        content = self._response.content
        completed = False
        async for chunk in content.iter_any():
            completed = content.at_eof()
            self._check(self._monitor.feed(len(chunk), complete=completed))
            yield chunk

        self._done = True
        if not completed:
            # hooks always observe a 100% notification
            self._check(self._monitor.feed(0, complete=True))

    def _check(self, error: Optional[BaseException]) -> None:
        if error is not None:
            self._destroy(error)
            raise error

    async def read(self) -> bytes:
        return b"".join([chunk async for chunk in self.iter_chunks()])

    def _destroy(self, error: BaseException) -> None:
        self._error = error
        logger.warning(
            "transfer_aborted",
            url=self.url,
            transferred=self._monitor.transferred,
            reason=str(error),
        )
        self._response.close()


class BoundedHttpClient:
    """aiohttp-backed client whose response bodies pass through progress hooks.

    Holds no per-request state, so one instance can serve concurrent requests.
    Use it as an async context manager (or call ``close()``) to release the
    session it created; an injected session is left open.
    """

    def __init__(
        self,
        download_limit: DownloadLimit = False,
        transport_options: Optional[Mapping[str, Any]] = None,
        *,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.download_limit = download_limit
        self._transport = {**transport_defaults(), **dict(transport_options or {})}
        self._session = session
        self._owns_session = session is None
        self._hooks: List[ProgressHook] = []
        if has_download_limit(download_limit):
            self._hooks.append(download_limit_hook(download_limit))

    def on_download_progress(self, hook: ProgressHook) -> None:
        self._hooks.append(hook)

    async def __aenter__(self) -> "BoundedHttpClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if not self._owns_session:
            return
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            settings = get_settings()
            self._session = aiohttp.ClientSession(
                headers={"User-Agent": settings.user_agent},
                timeout=aiohttp.ClientTimeout(total=settings.request_timeout_seconds),
                auto_decompress=bool(self._transport.get("decompress", True)),
            )
            self._owns_session = True
        return self._session

    def _request_kwargs(self, overrides: Mapping[str, Any]) -> dict[str, Any]:
        opts = {**self._transport, **overrides}
        opts.pop("decompress", None)

        kwargs: dict[str, Any] = {
            "allow_redirects": bool(opts.pop("follow_redirect", True)),
            "max_redirects": int(opts.pop("max_redirects", 10)),
        }
        headers = dict(self._transport.get("headers") or {})
        headers.update(overrides.get("headers") or {})
        opts.pop("headers", None)
        if headers:
            kwargs["headers"] = headers

        timeout = opts.pop("timeout", None)
        if isinstance(timeout, (int, float)):
            timeout = aiohttp.ClientTimeout(total=timeout)
        if timeout is not None:
            kwargs["timeout"] = timeout

        kwargs.update(opts)
        return kwargs

    @asynccontextmanager
    async def stream(self, method: str, url: str, **kwargs: Any) -> AsyncIterator[BoundedStream]:
        session = self._get_session()
        async with session.request(method, url, **self._request_kwargs(kwargs)) as response:
            monitor = _TransferMonitor(list(self._hooks), response.content_length)
            yield BoundedStream(response, monitor)

    async def request(self, method: str, url: str, **kwargs: Any) -> BufferedResponse:
        async with self.stream(method, url, **kwargs) as stream:
            body = await stream.read()
            return BufferedResponse(
                url=stream.url,
                status=stream.status,
                headers=stream.headers,
                body=body,
                charset=stream.charset,
                content_type=stream.content_type,
            )

    async def get(self, url: str, **kwargs: Any) -> BufferedResponse:
        return await self.request("GET", url, **kwargs)


def create_bounded_client(
    download_limit: DownloadLimit,
    transport_options: Optional[Mapping[str, Any]] = None,
    *,
    session: Optional[aiohttp.ClientSession] = None,
) -> BoundedHttpClient:
    """Build a client that aborts responses larger than ``download_limit`` bytes.

    ``False`` (or ``None``) disables the limit.
    """
    return BoundedHttpClient(download_limit, transport_options, session=session)
