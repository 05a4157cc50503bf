# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI               import konsol
from fastapi           import WebSocket
from pydantic          import ValidationError
from Libs              import ContentUnavailable, UnauthorizedAction, StaleAuthority
from ..Models          import JoinRoom, SetVideo, HostUpdate
from .SyncPartyManager import SyncPartyManager, sync_party_manager
import json


class MessageHandler:
    """Tek bir websocket bağlantısının mesaj işleyicisi"""

    def __init__(self, websocket: WebSocket, manager: SyncPartyManager = sync_party_manager):
        self.websocket   = websocket
        self.manager     = manager
        self.participant = None

    async def send_error(self, message: str):
        """Hata mesajı gönder (bağlantı açık kalır)"""
        await self.websocket.send_text(json.dumps({
            "type"    : "error",
            "message" : message
        }, ensure_ascii=False))

    async def _validation_error(self, hata: ValidationError):
        mesajlar = [f"{'.'.join(str(l) for l in e['loc'])}: {e['msg']}" for e in hata.errors()]
        await self.send_error(" | ".join(mesajlar))

    # ============== Handlers ==============

    async def handle_join(self, message: dict):
        """join-room mesajını işle"""
        try:
            istek = JoinRoom.model_validate(message)
        except ValidationError as hata:
            await self._validation_error(hata)
            return

        # Aynı bağlantı başka odaya geçiyorsa önce eskisinden çık
        if self.participant:
            await self.manager.leave(self.participant)

        self.participant = await self.manager.join(istek.room_id, self.websocket, istek.display_name)

    async def handle_request_host(self):
        """request-host mesajını işle"""
        await self.manager.request_host(self.participant)

    async def handle_set_video(self, message: dict):
        """set-video mesajını işle (sadece host)"""
        try:
            istek = SetVideo.model_validate(message)
        except ValidationError as hata:
            await self._validation_error(hata)
            return

        participant = self.participant
        if not participant:
            return

        try:
            await self.manager.set_video(participant, istek.content_id.strip(), istek.start_time)
        except (UnauthorizedAction, StaleAuthority):
            # Arayüz bunu zaten engeller, sessizce düşür
            return
        except ContentUnavailable as hata:
            konsol.log(f"[yellow]İçerik çözülemedi:[/] {hata}")
            await self.send_error(f"İçerik oynatılamıyor: {hata.content_id}")

    async def handle_host_update(self, message: dict):
        """host-update mesajını işle (sadece host)"""
        try:
            istek = HostUpdate.model_validate(message)
        except ValidationError as hata:
            await self._validation_error(hata)
            return

        try:
            await self.manager.host_update(self.participant, istek.partial())
        except UnauthorizedAction:
            return

    def is_progress_tick(self, message: dict) -> bool:
        """Kısılabilir ilerleme tick'i mi? Geçersiz ya da ayrık güncellemeler değil"""
        if not self.participant:
            return False

        try:
            istek = HostUpdate.model_validate(message)
        except ValidationError:
            return False

        return self.manager.store.is_progress_tick(self.participant.room_id, istek.partial())

    async def handle_disconnect(self):
        """Bağlantı koptuğunda çağrılır"""
        if not self.participant:
            return

        participant, self.participant = self.participant, None
        await self.manager.leave(participant)
