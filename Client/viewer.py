# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI    import konsol
from Libs   import ContentUnavailable, LoadTimeout
from .drift import Action, Correction, Desired, Local, decide
from .player import Player
from enum   import Enum
from typing import Callable
import asyncio, time

# ============== Zamanlama (saniye) ==============
LOAD_TIMEOUT = 8.0   # oynatıcıya bağlanma için üst sınır, otomatik tekrar yok
COOLDOWN     = 0.4   # düzeltmeden sonra yerel olaylara güvenmeden önce bekleme

class Phase(str, Enum):
    IDLE           = "idle"
    LOADING        = "loading"
    READY          = "ready"
    RATE_ADJUSTING = "rate_adjusting"
    ERROR          = "error"

class ViewerSession:
    """
    İzleyici başına senkron durum makinesi.

        idle → loading → ready ⇄ rate_adjusting
        ready → idle (içerik değişimi), loading → error (yükleme hatası)

    Düzeltme sürerken ve ardından `cooldown` boyunca `suppressing` True
    döner; bu sürede yerel oynatıcı olayları host yayınına ya da yeni
    sapma ölçümüne dönüşmemeli.
    """

    def __init__(self, player: Player, *, load_timeout: float = LOAD_TIMEOUT, cooldown: float = COOLDOWN, clock: Callable[[], float] = time.monotonic):
        self.player       = player
        self.load_timeout = load_timeout
        self.cooldown     = cooldown
        self.clock        = clock

        self.phase           = Phase.IDLE
        self.error           = None
        self.last_applied_at = None
        self.last_state      = None
        self._pending        = None
        self._failed_content = None
        self._correcting     = False
        self._cooldown_until = 0.0

    @property
    def status(self) -> str:
        """Kullanıcıya görünen durum: idle | loading | ready | error"""
        if self.phase is Phase.RATE_ADJUSTING:
            return Phase.READY.value
        return self.phase.value

    @property
    def suppressing(self) -> bool:
        return self._correcting or self.phase is Phase.LOADING or self.clock() < self._cooldown_until

    def _is_stale(self, state: dict) -> bool:
        updated_at = state.get("updatedAt")
        return updated_at is not None and self.last_applied_at is not None and updated_at < self.last_applied_at

    def _mark_applied(self, state: dict):
        updated_at = state.get("updatedAt")
        if updated_at is not None and (self.last_applied_at is None or updated_at > self.last_applied_at):
            self.last_applied_at = updated_at
        self.last_state = state

    def _local(self) -> Local:
        loaded = self.phase in (Phase.READY, Phase.RATE_ADJUSTING)
        return Local(
            content_id       = self.player.content_id if loaded else None,
            position_seconds = self.player.position,
            paused           = self.player.paused,
            rate             = self.player.rate,
        )

    async def apply(self, state: dict | None, *, force_load: bool = False) -> Correction | None:
        """
        Uzak state'i uygula. Eski (updatedAt daha küçük) state'ler yok sayılır,
        yükleme sürerken gelen en yenisi saklanıp hazır olunca uygulanır.
        """
        if not state or self._is_stale(state):
            return None

        if self.phase is Phase.LOADING:
            self._pending = state
            return None

        desired = Desired.from_state(state)

        # Hata sonrası aynı içerik için otomatik tekrar yok
        if self.phase is Phase.ERROR and not force_load and desired.content_id == self._failed_content:
            self._mark_applied(state)
            return None

        if force_load:
            correction = Correction(Action.LOAD, desired.position_seconds, desired.rate, desired.paused)
        else:
            correction = decide(desired, self._local())

        self._mark_applied(state)

        if correction.action is Action.LOAD:
            await self._load(state, desired)
        else:
            await self._correct(correction)

        return correction

    async def retry(self) -> Correction | None:
        """Elle tekrar deneme: son state'i zorla yeniden yükle"""
        if self.last_state is None:
            return None
        return await self.apply(self.last_state, force_load=True)

    async def _correct(self, correction: Correction):
        self._correcting = True
        try:
            if correction.seek_to is not None:
                await self.player.seek(correction.seek_to)

            self.player.set_rate(correction.rate)

            # paused geçişi her zaman en son
            if correction.paused and not self.player.paused:
                self.player.pause()
            elif not correction.paused and self.player.paused:
                self.player.play()
        finally:
            self._correcting     = False
            self._cooldown_until = self.clock() + self.cooldown

        self.phase = Phase.RATE_ADJUSTING if correction.action is Action.NUDGE else Phase.READY

    async def _load(self, state: dict, desired: Desired):
        if self.phase in (Phase.READY, Phase.RATE_ADJUSTING):
            self.player.unload()
            self.phase = Phase.IDLE

        self.phase    = Phase.LOADING
        self.error    = None
        self._pending = None

        try:
            url = state.get("videoUrl")
            if not desired.content_id or not url:
                raise ContentUnavailable(desired.content_id or "", "videoUrl yok")

            await asyncio.wait_for(self.player.load(desired.content_id, url), timeout=self.load_timeout)
        except asyncio.TimeoutError:
            self._fail(desired, LoadTimeout(f"{desired.content_id} {self.load_timeout} sn içinde yüklenemedi"))
            return
        except Exception as hata:
            self._fail(desired, hata)
            return

        self.phase = Phase.READY
        await self._correct(Correction(Action.HARD_SEEK, desired.position_seconds, desired.rate, desired.paused))

        pending, self._pending = self._pending, None
        if pending is not None:
            await self.apply(pending)

    def _fail(self, desired: Desired, hata: Exception):
        self.phase           = Phase.ERROR
        self.error           = hata
        self._pending        = None
        self._failed_content = desired.content_id
        konsol.log(f"[red]Oynatma hatası:[/] {type(hata).__name__} » {hata}")
