# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .RoomRegistry     import RoomRegistry, Authority, JoinResult, LeaveResult
from .PlaybackStore    import PlaybackStore
from .SyncPartyManager import SyncPartyManager, sync_party_manager
from .message_handlers import MessageHandler
