# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI               import konsol
from fastapi           import WebSocket
from Public.Media.Libs import MediaResolver, media_resolver
from ..Models          import Participant, epoch_ms
from .RoomRegistry     import RoomRegistry
from .PlaybackStore    import PlaybackStore
from typing            import Callable
import json, asyncio

SEND_TIMEOUT = 1.5  # saniye - yavaş client tüm odayı bekletmesin

class SyncPartyManager:
    """
    Oda kaydı + oynatma state'i + medya çözücü üzerine mesaj yayını.

    Her gelen mesaj tek bir handler içinde sonuna kadar işlenir; state'e
    dokunan tek askı noktası URL çözümüdür (bkz. PlaybackStore).
    """

    def __init__(self, resolver: MediaResolver | None = None, registry: RoomRegistry | None = None, clock: Callable[[], int] = epoch_ms):
        self.registry = registry or RoomRegistry()
        self.resolver = resolver or media_resolver
        self.store    = PlaybackStore(self.registry, self.resolver, clock)

    # ============== Gönderim ==============

    async def _safe_send(self, websocket: WebSocket | None, message_str: str):
        if websocket is None:
            return
        try:
            await asyncio.wait_for(websocket.send_text(message_str), timeout=SEND_TIMEOUT)
        except Exception as hata:
            konsol.log(f"[yellow]Gönderim başarısız:[/] {type(hata).__name__}")

    async def send_to(self, participant: Participant, message: dict):
        await self._safe_send(participant.websocket, json.dumps(message, ensure_ascii=False))

    async def broadcast_to_room(self, room_id: str, message: dict, exclude_id: str | None = None):
        """Odadaki herkese paralel gönder"""
        room = self.registry.get(room_id)
        if not room:
            return

        message_str = json.dumps(message, ensure_ascii=False)
        tasks = [
            self._safe_send(participant.websocket, message_str)
                for participant_id, participant in list(room.participants.items())
                    if participant_id != exclude_id
        ]
        if tasks:
            await asyncio.gather(*tasks)

    # ============== Oda yaşam döngüsü ==============

    async def join(self, room_id: str, websocket: WebSocket | None, display_name: str) -> Participant:
        participant = Participant(websocket=websocket, display_name=display_name)
        result      = self.registry.join(room_id, participant)

        state = await self.resolver.prepare_for_client(result.state)

        await self.send_to(participant, {
            "type"          : "room-joined",
            "roomId"        : room_id,
            "hostId"        : self.current_host(room_id),
            "state"         : state,
            "participantId" : participant.participant_id,
        })

        await self.broadcast_to_room(room_id, {
            "type"          : "participant-joined",
            "participantId" : participant.participant_id,
            "displayName"   : participant.display_name,
        }, exclude_id=participant.participant_id)

        return participant

    def current_host(self, room_id: str) -> str | None:
        room = self.registry.get(room_id)
        return room.host_id if room else None

    async def request_host(self, participant: Participant):
        room_id = participant.room_id
        room    = self.registry.get(room_id)
        if not room:
            return

        if room.host_id == participant.participant_id:
            await self.send_to(participant, {"type": "host-changed", "hostId": room.host_id})
            return

        host_id = self.registry.request_host(room_id, participant.participant_id)
        if host_id is None:
            return

        await self.broadcast_to_room(room_id, {"type": "host-changed", "hostId": host_id})

        if room.state:
            state = await self.resolver.prepare_for_client(room.state)
            await self.send_to(participant, {"type": "state-update", "state": state})

    async def set_video(self, participant: Participant, content_id: str, start_time: float = 0.0):
        """UnauthorizedAction / StaleAuthority / ContentUnavailable çağırana yükselir"""
        room_id = participant.room_id
        state   = await self.store.set_content(room_id, participant.participant_id, content_id, start_time)

        payload = await self.resolver.prepare_for_client(state)
        await self.broadcast_to_room(room_id, {"type": "content-changed", "state": payload})

    async def host_update(self, participant: Participant, partial: dict):
        room_id = participant.room_id
        state   = self.store.apply_host_update(room_id, participant.participant_id, partial)

        payload = await self.resolver.prepare_for_client(state)
        await self.broadcast_to_room(room_id, {"type": "state-update", "state": payload}, exclude_id=participant.participant_id)

    async def leave(self, participant: Participant):
        room_id = participant.room_id
        if room_id is None:
            return

        result = self.registry.leave(room_id, participant.participant_id)
        if result is None or result.room_closed:
            return

        await self.broadcast_to_room(room_id, {"type": "participant-left", "participantId": participant.participant_id})

        if not result.new_host_id:
            return

        await self.broadcast_to_room(room_id, {"type": "host-changed", "hostId": result.new_host_id})

        room = self.registry.get(room_id)
        if room and room.state:
            state = await self.resolver.prepare_for_client(room.state)
            # Yenileme sırasında oda kapanmış olabilir
            await self.broadcast_to_room(room_id, {"type": "state-update", "state": state})

    # ============== HTTP tarafı için anlık görüntü ==============

    async def get_room_snapshot(self, room_id: str) -> dict | None:
        room = self.registry.get(room_id)
        if not room:
            return None

        state = await self.resolver.prepare_for_client(room.state)
        room  = self.registry.get(room_id)
        if not room:
            return None

        return {
            "roomId"       : room.room_id,
            "hostId"       : room.host_id,
            "participants" : [
                {
                    "participantId" : participant.participant_id,
                    "displayName"   : participant.display_name,
                    "isHost"        : participant.participant_id == room.host_id,
                }
                for participant in room.participants.values()
            ],
            "state"        : state,
        }


# Singleton instance
sync_party_manager = SyncPartyManager()
