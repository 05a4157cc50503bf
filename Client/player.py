# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from typing import Callable
import abc, time

PLAYER_EVENTS = ("play", "pause", "seeking", "ratechange", "timeupdate")

EventListener = Callable[[str], None]

class Player(abc.ABC):
    """Yerel oynatıcı arayüzü; olaylar abonelere senkron iletilir"""

    def __init__(self):
        self._listeners: list[EventListener] = []

    def subscribe(self, listener: EventListener):
        self._listeners.append(listener)

    def unsubscribe(self, listener: EventListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, event: str):
        for listener in list(self._listeners):
            listener(event)

    @property
    @abc.abstractmethod
    def content_id(self) -> str | None: ...

    @property
    @abc.abstractmethod
    def position(self) -> float: ...

    @property
    @abc.abstractmethod
    def paused(self) -> bool: ...

    @property
    @abc.abstractmethod
    def rate(self) -> float: ...

    @abc.abstractmethod
    async def load(self, content_id: str, url: str):
        """Oynatıcı hazır olunca döner"""

    @abc.abstractmethod
    async def seek(self, position: float): ...

    @abc.abstractmethod
    def play(self): ...

    @abc.abstractmethod
    def pause(self): ...

    @abc.abstractmethod
    def set_rate(self, rate: float): ...

    def unload(self):
        """İçeriği bırak (varsayılan: bir şey yapma)"""

class ClockPlayer(Player):
    """
    Ekransız oynatıcı: konum = taban + (saat - çapa) * hız.
    Headless izleyici ve testler için.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        super().__init__()
        self.clock       = clock
        self._content_id = None
        self.url         = None
        self._base       = 0.0
        self._anchor     = clock()
        self._paused     = True
        self._rate       = 1.0

    def _rebase(self):
        self._base   = self.position
        self._anchor = self.clock()

    @property
    def content_id(self) -> str | None:
        return self._content_id

    @property
    def position(self) -> float:
        if self._paused:
            return self._base
        return self._base + (self.clock() - self._anchor) * self._rate

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def rate(self) -> float:
        return self._rate

    async def load(self, content_id: str, url: str):
        self._content_id = content_id
        self.url         = url
        self._base       = 0.0
        self._anchor     = self.clock()
        self._paused     = True
        self._rate       = 1.0

    async def seek(self, position: float):
        self._base   = max(float(position), 0.0)
        self._anchor = self.clock()
        self.emit("seeking")

    def play(self):
        if not self._paused:
            return
        self._anchor = self.clock()
        self._paused = False
        self.emit("play")

    def pause(self):
        if self._paused:
            return
        self._rebase()
        self._paused = True
        self.emit("pause")

    def set_rate(self, rate: float):
        if rate == self._rate:
            return
        self._rebase()
        self._rate = rate
        self.emit("ratechange")

    def tick(self):
        """İlerleme olayı (tarayıcıdaki timeupdate karşılığı)"""
        if not self._paused:
            self.emit("timeupdate")

    def unload(self):
        self._content_id = None
        self.url         = None
        self._base       = 0.0
        self._paused     = True
