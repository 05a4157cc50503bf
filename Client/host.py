# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .player import Player
from typing  import Callable
import asyncio, time

PROGRESS_INTERVAL  = 0.25   # saniye - ilerleme tick'leri için en sık yayın aralığı
HEARTBEAT_INTERVAL = 1.5    # saniye - host iken bu kadar sessiz kalınırsa durum yeniden yayınlanır
PROGRESS_EVENTS    = {"timeupdate"}

class HostEmitter:
    """
    Host'un yerel oynatıcı olaylarını `host-update` mesajına çevirir.

    play / pause / seeking / ratechange asla kısılmaz; timeupdate
    PROGRESS_INTERVAL'de en fazla bir kez geçer. Olay anında karar verilir,
    böylece düzeltme sırasında gelen olaylar sonradan sızmaz.
    """

    def __init__(self, player: Player, send: Callable[[dict], None], *, interval: float = PROGRESS_INTERVAL, heartbeat: float = HEARTBEAT_INTERVAL, clock: Callable[[], float] = time.monotonic, is_suppressed: Callable[[], bool] = lambda: False):
        self.player        = player
        self.send          = send
        self.interval      = interval
        self.heartbeat     = heartbeat
        self.clock         = clock
        self.is_suppressed = is_suppressed
        self.active        = False
        self._last_tick    = None
        self._last_sent    = None

    def snapshot(self) -> dict:
        return {
            "type"            : "host-update",
            "positionSeconds" : self.player.position,
            "paused"          : self.player.paused,
            "rate"            : self.player.rate,
        }

    def should_emit(self, event: str) -> bool:
        if not self.active or self.player.content_id is None or self.is_suppressed():
            return False

        if event in PROGRESS_EVENTS:
            now = self.clock()
            if self._last_tick is not None and now - self._last_tick < self.interval:
                return False
            self._last_tick = now

        return True

    def on_event(self, event: str) -> bool:
        """Player aboneliği; yayın yapıldıysa True"""
        if not self.should_emit(event):
            return False

        self.send(self.snapshot())
        self._last_sent = self.clock()
        return True

    def beat(self) -> bool:
        """
        Kalp atışı: son yayından beri `heartbeat` geçtiyse durumu yeniden yolla.
        Yolda kaybolan pause/seek güncellemelerini izleyiciler böyle yakalar;
        duraklatılmış host tick üretmediği için bu yol gerekli.
        """
        if self._last_sent is not None and self.clock() - self._last_sent < self.heartbeat:
            return False
        return self.on_event("heartbeat")

    async def heartbeat_loop(self):
        """Bağlantı boyunca çalışır, sadece aktifken yayın yapar"""
        while True:
            await asyncio.sleep(self.heartbeat / 3)
            self.beat()

    def activate(self) -> bool:
        """Host rolü alındı: mevcut durumu hemen yayınla"""
        self.active     = True
        self._last_tick = None
        self._last_sent = None
        return self.on_event("role-change")

    def deactivate(self):
        self.active = False
