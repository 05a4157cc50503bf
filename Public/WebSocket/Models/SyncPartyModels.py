# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from dataclasses import dataclass, field
from fastapi     import WebSocket
import uuid, time

def epoch_ms() -> int:
    """Şu anki zaman (epoch milisaniye)"""
    return int(time.time() * 1000)

@dataclass
class Participant:
    """Bağlantı ömrü kadar yaşayan izleyici kimliği"""
    websocket      : WebSocket | None
    display_name   : str
    participant_id : str        = field(default_factory=lambda: uuid.uuid4().hex[:12])
    room_id        : str | None = None

@dataclass
class PlaybackState:
    """Odada ne oynadığının anlık görüntüsü - sadece host yazar"""
    content_id        : str
    video_url         : str
    display_name      : str        = ""
    size              : int | None = None
    position_seconds  : float      = 0.0
    paused            : bool       = True
    rate              : float      = 1.0
    updated_at        : int        = field(default_factory=epoch_ms)
    status            : str        = "ready"
    # Sadece sunucu tarafı - client'a asla gönderilmez
    access_key        : str        = ""
    access_expires_at : int | None = None

    def public(self) -> dict:
        """Client'a giden state payload'ı (iç alanlar hariç)"""
        return {
            "contentId"       : self.content_id,
            "videoUrl"        : self.video_url,
            "displayName"     : self.display_name,
            "size"            : self.size,
            "positionSeconds" : self.position_seconds,
            "paused"          : self.paused,
            "rate"            : self.rate,
            "updatedAt"       : self.updated_at,
            "status"          : self.status,
        }

@dataclass
class Room:
    """Senkron izleme odası"""
    room_id      : str
    host_id      : str | None = None
    # dict ekleme sırası = katılım sırası (host devri buna göre)
    participants : dict[str, Participant] = field(default_factory=dict)
    state        : PlaybackState | None   = None
    # Her host değişiminde artar, askıdaki işlemler bununla doğrulanır
    generation   : int = 0
