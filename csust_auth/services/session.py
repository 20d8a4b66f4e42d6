import asyncio
import logging
from typing import Optional, Protocol

import httpx

from ..config import settings

logger = logging.getLogger(__name__)

ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


class CookieStore(Protocol):
    """cookie 持久化目标；SessionStore 只通过这三个方法访问存储介质"""

    def save_cookies(self, session: "SessionStore") -> None: ...

    def restore_cookies(self, session: "SessionStore") -> None: ...

    def clear_cookies(self) -> None: ...


class SessionStore:
    """
    持有一个带持久 cookie jar 的 httpx.AsyncClient。
    同一会话上的请求与 cookie 读写通过 asyncio.Lock 串行化。
    """

    def __init__(
        self,
        cookie_store: Optional[CookieStore] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.cookie_store = cookie_store
        self._transport = transport
        self._lock = asyncio.Lock()
        self.client = self._new_client()

    def _new_client(self) -> httpx.AsyncClient:
        headers = {"User-Agent": settings.USER_AGENT, "Accept": ACCEPT}
        return httpx.AsyncClient(
            timeout=settings.HTTP_TIMEOUT,
            follow_redirects=True,
            headers=headers,
            transport=self._transport,
        )

    @property
    def transport(self) -> Optional[httpx.AsyncBaseTransport]:
        return self._transport

    @property
    def cookies(self) -> httpx.Cookies:
        return self.client.cookies

    async def execute(self, method: str, url: str, **kwargs) -> httpx.Response:
        # 不重试，传输层异常原样抛出
        async with self._lock:
            resp = await self.client.request(method, url, **kwargs)
        logger.debug("%s %s -> %s (%s)", method, url, resp.status_code, resp.url)
        return resp

    async def get(self, url: str, **kwargs) -> httpx.Response:
        return await self.execute("GET", url, **kwargs)

    async def post(self, url: str, **kwargs) -> httpx.Response:
        return await self.execute("POST", url, **kwargs)

    async def save_cookies(self) -> None:
        if self.cookie_store is None:
            return
        async with self._lock:
            self.cookie_store.save_cookies(self)

    async def restore_cookies(self) -> None:
        if self.cookie_store is None:
            return
        async with self._lock:
            self.cookie_store.restore_cookies(self)

    def restore_cookies_nowait(self) -> None:
        """构造阶段使用：此时尚无进行中的请求，无需加锁"""
        if self.cookie_store is not None:
            self.cookie_store.restore_cookies(self)

    async def clear_cookies(self) -> None:
        if self.cookie_store is None:
            return
        async with self._lock:
            self.cookie_store.clear_cookies()

    async def reset(self) -> None:
        """丢弃旧 client 与 cookie jar，回到未登录状态"""
        async with self._lock:
            old = self.client
            self.client = self._new_client()
        await old.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()
