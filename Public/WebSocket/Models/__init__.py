# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .SyncPartyModels import Participant, PlaybackState, Room, epoch_ms
from .SyncMessages    import JoinRoom, SetVideo, HostUpdate
