# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from __future__   import annotations
from urllib.parse import urlparse
import httpx, asyncio

class RequestLimiter:
    """
    Dış servislere giden istekler için global ve host bazlı eşzamanlılık sınırı.
    Medya servisi yavaşladığında odaların tamamının kilitlenmesini önler.
    """
    def __init__(self, global_limit: int = 64, host_limit: int = 16):
        self.global_semaphore = asyncio.Semaphore(global_limit)
        self.host_semaphores: dict[str, asyncio.Semaphore] = {}
        self.host_limit = host_limit

    def for_host(self, host: str) -> asyncio.Semaphore:
        # Tek thread'li event loop: await yok, kilide gerek yok
        if host not in self.host_semaphores:
            self.host_semaphores[host] = asyncio.Semaphore(self.host_limit)
        return self.host_semaphores[host]

class GlobalClient:
    """
    Paylaşımlı httpx.AsyncClient (HTTP/2 + connection pooling).
    lifespan içinde start() / stop() ile yönetilir.
    """
    _instance : GlobalClient      | None = None
    _client   : httpx.AsyncClient | None = None
    _limiter  : RequestLimiter    | None = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(GlobalClient, cls).__new__(cls)
        return cls._instance

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("GlobalClient henüz başlatılmadı! lifespan içinde 'start()' çağrılmalı.")
        return self._client

    @property
    def limiter(self) -> RequestLimiter:
        if self._limiter is None:
            self._limiter = RequestLimiter()
        return self._limiter

    async def start(self):
        """Client'ı ilklendir (FastAPI startup'ta çağrılmalı)"""
        if self._client is not None:
            return

        self._client = httpx.AsyncClient(
            http2            = True,
            headers          = {"User-Agent": "KekikSyncParty/1.0 (+httpx)"},
            limits           = httpx.Limits(max_connections=64, max_keepalive_connections=16, keepalive_expiry=30.0),
            timeout          = httpx.Timeout(connect=5.0, read=10.0, write=5.0, pool=5.0),
            follow_redirects = True
        )

    async def stop(self):
        """Client'ı kapat (FastAPI shutdown'da çağrılmalı)"""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch(self, url: str, method: str = "GET", **kwargs) -> httpx.Response:
        """Paylaşımlı client ve limiter ile istek atar."""
        host_sem = self.limiter.for_host(urlparse(url).netloc)

        async with self.limiter.global_semaphore:
            async with host_sem:
                return await self.client.request(method, url, **kwargs)

    async def fetch_json(self, url: str, **kwargs) -> dict:
        """GET + raise_for_status + JSON"""
        response = await self.fetch(url, **kwargs)
        response.raise_for_status()
        return response.json()

# Singleton instance
global_request = GlobalClient()
