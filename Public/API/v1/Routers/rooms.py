# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from Core                  import HTTPException
from .                     import api_v1_router, api_v1_global_message
from Public.WebSocket.Libs import sync_party_manager
import secrets, string

ROOM_ID_ALPHABET = string.ascii_uppercase + string.digits
ROOM_ID_LENGTH   = 6

def new_room_id() -> str:
    """Aktif odalarla çakışmayan kısa oda kimliği"""
    while True:
        room_id = "".join(secrets.choice(ROOM_ID_ALPHABET) for _ in range(ROOM_ID_LENGTH))
        if sync_party_manager.registry.get(room_id) is None:
            return room_id

@api_v1_router.get("/rooms/new")
async def create_room_id():
    """Yeni oda kimliği (oda ilk katılımda oluşur)"""
    return {**api_v1_global_message, "roomId": new_room_id()}

@api_v1_router.get("/rooms/{room_id}")
async def room_snapshot(room_id: str):
    snapshot = await sync_party_manager.get_room_snapshot(room_id)
    if snapshot is None:
        raise HTTPException(status_code=404, detail="Oda bulunamadı")

    return {**api_v1_global_message, "result": snapshot}
