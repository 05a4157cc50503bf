# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from dataclasses import dataclass
from enum        import Enum

# ============== Eşikler ==============
HARD_THRESHOLD = 1.2    # saniye - üstünde doğrudan seek
SOFT_THRESHOLD = 0.35   # saniye - üstünde hız dürtmesi
RATE_STEP      = 0.08   # dürtme adımı
MIN_RATE       = 0.5
MAX_RATE       = 2.0

class Action(str, Enum):
    LOAD      = "load"
    HARD_SEEK = "hard_seek"
    NUDGE     = "nudge"
    SNAP      = "snap"

@dataclass(frozen=True)
class Desired:
    """Host'un ilan ettiği oynatma durumu"""
    content_id       : str | None
    position_seconds : float
    paused           : bool
    rate             : float = 1.0

    @classmethod
    def from_state(cls, state: dict) -> "Desired":
        rate = state.get("rate") or 1.0
        return cls(
            content_id       = state.get("contentId"),
            position_seconds = float(state.get("positionSeconds") or 0.0),
            paused           = bool(state.get("paused")),
            rate             = float(rate) if rate > 0 else 1.0,
        )

@dataclass(frozen=True)
class Local:
    """Yerel oynatıcının gözlenen durumu"""
    content_id       : str | None
    position_seconds : float
    paused           : bool
    rate             : float

@dataclass(frozen=True)
class Correction:
    action  : Action
    seek_to : float | None
    rate    : float
    paused  : bool
    diff    : float = 0.0

def clamp_rate(rate: float) -> float:
    return min(max(rate, MIN_RATE), MAX_RATE)

def decide(desired: Desired, local: Local) -> Correction:
    """
    Sırasıyla:
      1. İçerik farklıysa / yüklü değilse → yükle
      2. |fark| > HARD_THRESHOLD ya da host duraklatmışsa → seek + hızı eşitle
         |fark| > SOFT_THRESHOLD → seek yok, hızı farkı kapatacak yöne dürt
         aksi halde → hızı tam olarak host'unkine çek
      3. paused geçişi her zaman en son uygulanır (uygulayıcının işi)
    """
    if local.content_id is None or desired.content_id != local.content_id:
        return Correction(Action.LOAD, desired.position_seconds, desired.rate, desired.paused)

    diff = desired.position_seconds - local.position_seconds

    if abs(diff) > HARD_THRESHOLD or desired.paused:
        return Correction(Action.HARD_SEEK, desired.position_seconds, desired.rate, desired.paused, diff)

    if abs(diff) > SOFT_THRESHOLD:
        step = RATE_STEP if diff > 0 else -RATE_STEP
        return Correction(Action.NUDGE, None, clamp_rate(desired.rate + step), desired.paused, diff)

    return Correction(Action.SNAP, None, desired.rate, desired.paused, diff)
