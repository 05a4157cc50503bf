# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI                 import konsol
from Libs                import UnauthorizedAction, StaleAuthority
from Public.Media.Libs   import MediaResolver
from ..Models            import PlaybackState, epoch_ms
from .RoomRegistry       import RoomRegistry
from typing              import Callable
import math

SEEK_TOLERANCE = 1.0  # saniye - beklenen konumdan daha büyük sıçrama seek sayılır

class PlaybackStore:
    """
    Oda başına oynatma state'i. Tek yazar host, erişim kontrolü kilitsiz:
    askıya giren tek işlem `set_content` içindeki URL çözümü, dönüşte
    host kuşağı yeniden doğrulanır.
    """

    def __init__(self, registry: RoomRegistry, resolver: MediaResolver, clock: Callable[[], int] = epoch_ms):
        self.registry = registry
        self.resolver = resolver
        self.clock    = clock

    def _stamp(self, previous: PlaybackState | None) -> int:
        """updated_at oda içinde geri gitmez"""
        now = self.clock()
        if previous is not None and previous.updated_at > now:
            return previous.updated_at
        return now

    async def set_content(self, room_id: str, participant_id: str, content_id: str, start_seconds: float = 0.0) -> PlaybackState:
        """
        İçeriği çöz, duraklatılmış taze state kur.

        Raises:
            UnauthorizedAction: çağıran host değil
            StaleAuthority: çözüm sürerken host değişti
            ContentUnavailable: içerik çözülemedi
        """
        authority = self.registry.authorize(room_id, participant_id)
        if authority is None:
            raise UnauthorizedAction(participant_id)

        access = await self.resolver.resolve(content_id)

        if not self.registry.is_current(authority):
            konsol.log(f"[yellow]Eski yetkiyle gelen içerik değişimi atıldı ({room_id}):[/] {content_id}")
            raise StaleAuthority(participant_id)

        start = float(start_seconds or 0.0)
        start = max(start, 0.0) if math.isfinite(start) else 0.0

        room  = authority.room
        state = PlaybackState(
            content_id        = content_id,
            video_url         = access.url,
            display_name      = access.name,
            size              = access.size,
            position_seconds  = start,
            paused            = True,
            rate              = 1.0,
            updated_at        = self._stamp(room.state),
            status            = access.status,
            access_key        = access.access_key,
            access_expires_at = access.expires_at,
        )
        room.state = state
        konsol.log(f"[cyan]İçerik değişti ({room_id}):[/] {content_id}")
        return state

    def apply_host_update(self, room_id: str, participant_id: str, partial: dict) -> PlaybackState:
        """
        Host'un yerel oynatıcı gözlemini state'e işle.

        Raises:
            UnauthorizedAction: çağıran host değil ya da henüz state yok
        """
        authority = self.registry.authorize(room_id, participant_id)
        if authority is None or authority.room.state is None:
            raise UnauthorizedAction(participant_id)

        state = authority.room.state

        position = partial.get("position_seconds")
        if position is not None and math.isfinite(position):
            state.position_seconds = max(float(position), 0.0)

        if partial.get("paused") is not None:
            state.paused = bool(partial["paused"])

        # Hız pozitif çarpan olmalı, host'un koyduğu değer başka kısıtlanmaz
        rate = partial.get("rate")
        if rate is not None and math.isfinite(rate) and rate > 0:
            state.rate = float(rate)

        state.updated_at = self._stamp(state)
        return state

    def is_progress_tick(self, room_id: str, partial: dict) -> bool:
        """
        Güncelleme sadece akan zamanı mı bildiriyor? paused/rate aynı ve
        konum, son state'ten beklenen yerin SEEK_TOLERANCE kadar yakınında
        ise evet. Aksi halde play/pause/seek/hız değişimidir, kısılmaz.
        """
        room  = self.registry.get(room_id)
        state = room.state if room else None
        if state is None:
            return False

        if partial.get("paused") is not None and partial["paused"] != state.paused:
            return False

        if partial.get("rate") is not None and partial["rate"] != state.rate:
            return False

        position = partial.get("position_seconds")
        if position is None:
            return True

        beklenen = state.position_seconds
        if not state.paused:
            beklenen += max(self.clock() - state.updated_at, 0) / 1000 * state.rate

        return abs(position - beklenen) <= SEEK_TOLERANCE
