# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI                     import konsol
from Libs                    import ContentUnavailable
from Public.WebSocket.Models import PlaybackState, epoch_ms
from Settings                import REFRESH_BUFFER_MS
from .backends               import MediaBackend, MediaAccess, MediaItem
from typing                  import Callable
import asyncio

class MediaResolver:
    """
    İçerik kimliğini süreli oynatma URL'sine çevirir ve state client'a
    verilmeden önce URL'nin tazeliğini garanti eder.

    Süre kontrolünün yapıldığı tek yer `ensure_fresh`; state'i client'a
    gönderen her yol önce bunu çağırmalı.
    """

    def __init__(self, backend: MediaBackend, refresh_buffer_ms: int = REFRESH_BUFFER_MS, clock: Callable[[], int] = epoch_ms):
        self.backend           = backend
        self.refresh_buffer_ms = refresh_buffer_ms
        self.clock             = clock
        self._refreshing       = {}   # id(state) -> süren yenileme görevi

    async def resolve(self, content_id: str) -> MediaAccess:
        """Çözülemezse ContentUnavailable"""
        if not content_id:
            raise ContentUnavailable("", "boş içerik kimliği")

        try:
            return await self.backend.resolve_playable_url(content_id)
        except ContentUnavailable:
            raise
        except Exception as hata:
            konsol.log(f"[red]Medya arka ucu hatası:[/] {content_id} » {type(hata).__name__}: {hata}")
            raise ContentUnavailable(content_id, str(hata)) from hata

    def needs_refresh(self, state: PlaybackState) -> bool:
        if state.access_expires_at is None:
            return True
        return self.clock() >= state.access_expires_at - self.refresh_buffer_ms

    async def ensure_fresh(self, state: PlaybackState | None) -> PlaybackState | None:
        """
        Bitişe `refresh_buffer_ms` kaldıysa URL'yi yerinde yenile (idempotent).
        Aynı state için eşzamanlı çağrılar tek yenilemeyi bekler.
        """
        if state is None or not state.access_key:
            return state

        if not self.needs_refresh(state):
            return state

        bekleyen = self._refreshing.get(id(state))
        if bekleyen is None:
            bekleyen = asyncio.ensure_future(self._refresh(state))
            self._refreshing[id(state)] = bekleyen
            bekleyen.add_done_callback(lambda _: self._refreshing.pop(id(state), None))

        # Bir çağıranın iptali ortak yenilemeyi iptal etmesin
        return await asyncio.shield(bekleyen)

    async def _refresh(self, state: PlaybackState) -> PlaybackState:
        try:
            access = await self.resolve(state.content_id)
        except ContentUnavailable as hata:
            # Okumayı bloklama: eski URL ile devam, izleyici oynatma hatası görür
            konsol.log(f"[yellow]Oynatma URL'si yenilenemedi:[/] {hata}")
            return state

        state.video_url         = access.url
        state.access_expires_at = access.expires_at
        state.access_key        = access.access_key or state.access_key
        return state

    async def prepare_for_client(self, state: PlaybackState | None) -> dict | None:
        """ensure_fresh + iç alanları ayıkla"""
        if state is None:
            return None

        await self.ensure_fresh(state)
        return state.public()

    async def list_content(self, limit: int) -> list[MediaItem]:
        return await self.backend.list_content(limit)
