# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI         import konsol
from dataclasses import dataclass
from ..Models    import Participant, PlaybackState, Room

@dataclass(frozen=True)
class Authority:
    """Host yetkisinin belirli bir kuşaktaki anlık görüntüsü"""
    room           : Room
    participant_id : str
    generation     : int

@dataclass
class JoinResult:
    host_id      : str
    state        : PlaybackState | None
    became_host  : bool

@dataclass
class LeaveResult:
    was_host    : bool
    new_host_id : str | None
    room_closed : bool

class RoomRegistry:
    """
    Süreç ömürlü oda tablosu. Host ataması ve katılımcı kümesi buranın.

    Değişmez: katılımcı varsa host_id dolu ve katılımcılardan biri.
    Host devrinde halef, kalanlar arasında en eski katılan kişidir.
    """

    def __init__(self):
        self.rooms: dict[str, Room] = {}

    def get(self, room_id: str) -> Room | None:
        return self.rooms.get(room_id)

    def _set_host(self, room: Room, participant_id: str | None):
        room.host_id     = participant_id
        room.generation += 1

    def join(self, room_id: str, participant: Participant) -> JoinResult:
        """Oda yoksa oluştur, katılımcıyı ekle; host yoksa host yap"""
        room = self.rooms.get(room_id)
        if not room:
            room = Room(room_id=room_id)
            self.rooms[room_id] = room
            konsol.log(f"[green]Oda oluşturuldu:[/] {room_id}")

        participant.room_id = room_id
        room.participants[participant.participant_id] = participant

        became_host = room.host_id is None
        if became_host:
            self._set_host(room, participant.participant_id)

        return JoinResult(host_id=room.host_id, state=room.state, became_host=became_host)

    def request_host(self, room_id: str, participant_id: str) -> str | None:
        """Son isteyen kazanır; onay/oylama yok"""
        room = self.rooms.get(room_id)
        if not room or participant_id not in room.participants:
            return None

        if room.host_id != participant_id:
            self._set_host(room, participant_id)
            konsol.log(f"[cyan]Host devri ({room_id}):[/] {participant_id}")

        return room.host_id

    def leave(self, room_id: str, participant_id: str) -> LeaveResult | None:
        room = self.rooms.get(room_id)
        if not room or participant_id not in room.participants:
            return None

        del room.participants[participant_id]
        was_host = room.host_id == participant_id

        if not room.participants:
            # State kalıcı değil, oda ile birlikte gider
            self._set_host(room, None)
            del self.rooms[room_id]
            konsol.log(f"[yellow]Oda kapatıldı:[/] {room_id}")
            return LeaveResult(was_host=was_host, new_host_id=None, room_closed=True)

        new_host_id = None
        if was_host:
            new_host_id = next(iter(room.participants))
            self._set_host(room, new_host_id)
            konsol.log(f"[cyan]Host ayrıldı ({room_id}), yeni host:[/] {new_host_id}")

        return LeaveResult(was_host=was_host, new_host_id=new_host_id, room_closed=False)

    def authorize(self, room_id: str, participant_id: str) -> Authority | None:
        """Katılımcı şu an host ise yetkiyi kuşağıyla birlikte döndür"""
        room = self.rooms.get(room_id)
        if not room or room.host_id != participant_id:
            return None
        return Authority(room=room, participant_id=participant_id, generation=room.generation)

    def is_current(self, authority: Authority) -> bool:
        """Yetki alındığından beri oda ve host kuşağı değişmedi mi?"""
        room = authority.room
        return (
            self.rooms.get(room.room_id) is room
            and room.generation == authority.generation
            and room.host_id == authority.participant_id
        )
