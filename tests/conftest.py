# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from Libs                  import ContentUnavailable
from Public.Media.Libs     import MediaBackend, MediaAccess, MediaItem, MediaResolver
from Public.WebSocket.Libs import SyncPartyManager
import pytest, asyncio, json

BASLANGIC_MS = 1_700_000_000_000

class ManualClock:
    """Elle ilerletilen saat"""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, amount: float):
        self.now += amount

class FakeBackend(MediaBackend):
    def __init__(self, clock, ttl_ms: int = 3_600_000):
        self.clock   = clock
        self.ttl_ms  = ttl_ms
        self.catalog = {"vid1": "Film.mp4", "vid2": "Dizi.mp4"}
        self.calls   = []
        self.fail    = False
        self.gate    = None

    async def resolve_playable_url(self, content_id: str) -> MediaAccess:
        self.calls.append(content_id)
        if self.gate is not None:
            await self.gate.wait()

        if self.fail or content_id not in self.catalog:
            raise ContentUnavailable(content_id, "yok")

        return MediaAccess(
            url        = f"https://cdn.test/{content_id}?v={len(self.calls)}",
            expires_at = self.clock() + self.ttl_ms,
            access_key = f"videos/{content_id}",
            name       = self.catalog[content_id],
            size       = 1024,
        )

    async def list_content(self, limit: int) -> list[MediaItem]:
        return [
            MediaItem(content_id=cid, name=name, size=1024, last_modified=BASLANGIC_MS)
            for cid, name in list(self.catalog.items())[:limit]
        ]

class FakeWebSocket:
    def __init__(self):
        self.sent = []

    async def send_text(self, text: str):
        self.sent.append(json.loads(text))

    def of_type(self, message_type: str) -> list[dict]:
        return [m for m in self.sent if m["type"] == message_type]

    def types(self) -> list[str]:
        return [m["type"] for m in self.sent]

@pytest.fixture
def epoch_clock():
    return ManualClock(BASLANGIC_MS)

@pytest.fixture
def backend(epoch_clock):
    return FakeBackend(epoch_clock)

@pytest.fixture
def resolver(backend, epoch_clock):
    return MediaResolver(backend, refresh_buffer_ms=60_000, clock=epoch_clock)

@pytest.fixture
def manager(resolver, epoch_clock):
    return SyncPartyManager(resolver=resolver, clock=epoch_clock)

def assert_host_invariant(manager: SyncPartyManager):
    for room in manager.registry.rooms.values():
        assert room.participants
        assert room.host_id in room.participants

@pytest.fixture
def app_client(monkeypatch):
    """Uygulama singleton'ları sahte arka uçla; lifespan çalıştırılmaz"""
    from fastapi.testclient      import TestClient
    from Core                    import kekik_FastAPI
    from Public.Media.Libs       import media_resolver
    from Public.WebSocket.Libs   import sync_party_manager
    from Public.WebSocket.Models import epoch_ms

    fake = FakeBackend(epoch_ms)
    monkeypatch.setattr(media_resolver, "backend", fake)
    monkeypatch.setattr(sync_party_manager.registry, "rooms", {})

    client = TestClient(kekik_FastAPI)
    client.backend = fake
    return client
