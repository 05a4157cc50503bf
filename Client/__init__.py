# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .drift      import Action, Correction, Desired, Local, decide, HARD_THRESHOLD, SOFT_THRESHOLD, RATE_STEP, MIN_RATE, MAX_RATE
from .player     import Player, ClockPlayer
from .viewer     import ViewerSession, Phase, LOAD_TIMEOUT, COOLDOWN
from .host       import HostEmitter, PROGRESS_INTERVAL, HEARTBEAT_INTERVAL
from .connection import SyncClient
