# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI     import konsol
from .drift  import Correction
from .host   import HostEmitter
from .player import Player, ClockPlayer
from .viewer import ViewerSession
from typing  import Callable
import asyncio, json, websockets

class SyncClient:
    """
    Senkron sunucusuna bağlanan izleyici/host istemcisi.

    Gelen mesajlar tek bir döngüde sırayla işlenir; giden mesajlar
    (host-update dahil) tek bir kuyruktan sırayla yollanır.
    """

    def __init__(self, url: str, room_id: str, display_name: str = "Guest", player: Player | None = None, *, on_correction: Callable[[Correction], None] | None = None):
        self.url           = url
        self.room_id       = room_id
        self.display_name  = display_name
        self.player        = player or ClockPlayer()
        self.session       = ViewerSession(self.player)
        self.outbox        = asyncio.Queue()
        self.emitter       = HostEmitter(self.player, self.outbox.put_nowait, is_suppressed=lambda: self.session.suppressing)
        self.on_correction = on_correction

        self.participant_id = None
        self.host_id        = None
        self.participants   = {}
        self.last_error     = None
        self.websocket      = None

        self.player.subscribe(self.emitter.on_event)

        self.handlers = {
            "room-joined"        : self._on_room_joined,
            "content-changed"    : self._on_content_changed,
            "state-update"       : self._on_state_update,
            "host-changed"       : self._on_host_changed,
            "participant-joined" : self._on_participant_joined,
            "participant-left"   : self._on_participant_left,
            "error"              : self._on_error,
        }

    @property
    def is_host(self) -> bool:
        return self.participant_id is not None and self.participant_id == self.host_id

    # ============== Giden ==============

    def join(self):
        self.outbox.put_nowait({"type": "join-room", "roomId": self.room_id, "displayName": self.display_name})

    def request_host(self):
        self.outbox.put_nowait({"type": "request-host"})

    def set_video(self, content_id: str, start_time: float = 0.0):
        self.outbox.put_nowait({"type": "set-video", "contentId": content_id, "startTime": start_time})

    async def _sender(self):
        while True:
            message = await self.outbox.get()
            await self.websocket.send(json.dumps(message, ensure_ascii=False))

    # ============== Bağlantı ==============

    async def run(self):
        """Bağlan, odaya katıl, bağlantı kapanana kadar mesajları işle"""
        async with websockets.connect(self.url) as websocket:
            self.websocket = websocket
            self.join()
            sender    = asyncio.create_task(self._sender())
            heartbeat = asyncio.create_task(self.emitter.heartbeat_loop())
            try:
                async for raw in websocket:
                    try:
                        message = json.loads(raw)
                    except json.JSONDecodeError:
                        konsol.log(f"[yellow]Geçersiz mesaj:[/] {raw[:80]}")
                        continue
                    await self.dispatch(message)
            finally:
                sender.cancel()
                heartbeat.cancel()
                self.emitter.deactivate()
                self.websocket = None

    async def dispatch(self, message: dict):
        handler = self.handlers.get(message.get("type"))
        if handler:
            await handler(message)

    def _report(self, correction: Correction | None):
        if correction and self.on_correction:
            self.on_correction(correction)

    # ============== Gelen ==============

    def _set_role(self, host_id: str | None):
        was_host     = self.is_host
        self.host_id = host_id

        if was_host == self.is_host:
            return

        if self.is_host:
            self.emitter.activate()
        else:
            self.emitter.deactivate()

    async def _on_room_joined(self, message: dict):
        self.participant_id = message.get("participantId")
        self.room_id        = message.get("roomId", self.room_id)
        self._set_role(message.get("hostId"))

        state = message.get("state")
        if state:
            self._report(await self.session.apply(state, force_load=True))

    async def _on_content_changed(self, message: dict):
        self._report(await self.session.apply(message.get("state"), force_load=True))

    async def _on_state_update(self, message: dict):
        if self.is_host:
            return
        self._report(await self.session.apply(message.get("state")))

    async def _on_host_changed(self, message: dict):
        self._set_role(message.get("hostId"))

    async def _on_participant_joined(self, message: dict):
        self.participants[message.get("participantId")] = message.get("displayName")

    async def _on_participant_left(self, message: dict):
        self.participants.pop(message.get("participantId"), None)

    async def _on_error(self, message: dict):
        self.last_error = message.get("message")
        konsol.log(f"[yellow]Sunucu hatası:[/] {self.last_error}")
