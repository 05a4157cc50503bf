# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from Libs                    import UnauthorizedAction, StaleAuthority, ContentUnavailable
from Public.WebSocket.Libs   import RoomRegistry, PlaybackStore
from Public.WebSocket.Models import Participant
import pytest, asyncio

@pytest.fixture
def oda(resolver, epoch_clock):
    registry = RoomRegistry()
    store    = PlaybackStore(registry, resolver, epoch_clock)
    host     = Participant(websocket=None, display_name="Host")
    izleyici = Participant(websocket=None, display_name="İzleyici")
    registry.join("ODA1", host)
    registry.join("ODA1", izleyici)
    return registry, store, host, izleyici

async def test_set_content_builds_paused_state(oda):
    registry, store, host, _ = oda

    state = await store.set_content("ODA1", host.participant_id, "vid1", 42.5)

    assert registry.get("ODA1").state is state
    assert state.content_id == "vid1"
    assert state.video_url.startswith("https://cdn.test/vid1")
    assert state.display_name == "Film.mp4"
    assert state.position_seconds == 42.5
    assert state.paused is True
    assert state.rate == 1.0
    assert state.access_key == "videos/vid1"

async def test_set_content_clamps_negative_start(oda):
    _, store, host, _ = oda
    state = await store.set_content("ODA1", host.participant_id, "vid1", -5)
    assert state.position_seconds == 0.0

async def test_non_host_cannot_set_content(oda, backend):
    registry, store, _, izleyici = oda

    with pytest.raises(UnauthorizedAction):
        await store.set_content("ODA1", izleyici.participant_id, "vid1")

    assert backend.calls == []
    assert registry.get("ODA1").state is None

async def test_unresolvable_content_leaves_state_untouched(oda):
    registry, store, host, _ = oda
    onceki = await store.set_content("ODA1", host.participant_id, "vid1")

    with pytest.raises(ContentUnavailable):
        await store.set_content("ODA1", host.participant_id, "yok")

    assert registry.get("ODA1").state is onceki

async def test_host_change_during_resolve_discards_result(oda, backend):
    registry, store, host, izleyici = oda
    backend.gate = asyncio.Event()

    gorev = asyncio.create_task(store.set_content("ODA1", host.participant_id, "vid1"))
    await asyncio.sleep(0)

    registry.request_host("ODA1", izleyici.participant_id)
    backend.gate.set()

    with pytest.raises(StaleAuthority):
        await gorev
    assert registry.get("ODA1").state is None

async def test_room_teardown_during_resolve_discards_result(oda, backend):
    registry, store, host, izleyici = oda
    backend.gate = asyncio.Event()

    gorev = asyncio.create_task(store.set_content("ODA1", host.participant_id, "vid1"))
    await asyncio.sleep(0)

    registry.leave("ODA1", izleyici.participant_id)
    registry.leave("ODA1", host.participant_id)
    backend.gate.set()

    with pytest.raises(StaleAuthority):
        await gorev
    assert registry.get("ODA1") is None

async def test_host_update_merges_partial(oda, epoch_clock):
    _, store, host, _ = oda
    await store.set_content("ODA1", host.participant_id, "vid1")

    epoch_clock.advance(500)
    state = store.apply_host_update("ODA1", host.participant_id, {"position_seconds": 12.0, "paused": False})

    assert state.position_seconds == 12.0
    assert state.paused is False
    assert state.rate == 1.0
    assert state.updated_at == epoch_clock()

    state = store.apply_host_update("ODA1", host.participant_id, {"rate": 1.5})
    assert state.rate == 1.5
    assert state.position_seconds == 12.0

async def test_host_update_ignores_non_positive_rate_and_clamps_position(oda):
    _, store, host, _ = oda
    await store.set_content("ODA1", host.participant_id, "vid1")

    state = store.apply_host_update("ODA1", host.participant_id, {"rate": 0, "position_seconds": -3})
    assert state.rate == 1.0
    assert state.position_seconds == 0.0

    state = store.apply_host_update("ODA1", host.participant_id, {"rate": -2})
    assert state.rate == 1.0

async def test_host_update_rejected_for_viewer_or_without_state(oda):
    _, store, host, izleyici = oda

    with pytest.raises(UnauthorizedAction):
        store.apply_host_update("ODA1", host.participant_id, {"paused": False})

    await store.set_content("ODA1", host.participant_id, "vid1")
    with pytest.raises(UnauthorizedAction):
        store.apply_host_update("ODA1", izleyici.participant_id, {"paused": False})

async def test_updated_at_never_goes_backwards(oda, epoch_clock):
    _, store, host, _ = oda
    state = await store.set_content("ODA1", host.participant_id, "vid1")
    ilk   = state.updated_at

    # Duvar saati geri atlasa bile damga geriye gitmez
    epoch_clock.advance(-10_000)
    state = store.apply_host_update("ODA1", host.participant_id, {"position_seconds": 3.0})
    assert state.updated_at == ilk

    epoch_clock.advance(20_000)
    state = store.apply_host_update("ODA1", host.participant_id, {"position_seconds": 4.0})
    assert state.updated_at > ilk

async def test_non_finite_values_never_reach_state(oda):
    _, store, host, _ = oda
    state = await store.set_content("ODA1", host.participant_id, "vid1", float("nan"))
    assert state.position_seconds == 0.0

    store.apply_host_update("ODA1", host.participant_id, {"position_seconds": 8.0})
    state = store.apply_host_update("ODA1", host.participant_id, {"position_seconds": float("inf"), "rate": float("nan")})
    assert state.position_seconds == 8.0
    assert state.rate == 1.0

async def test_progress_tick_classification(oda, epoch_clock):
    _, store, host, _ = oda
    await store.set_content("ODA1", host.participant_id, "vid1", 10.0)
    store.apply_host_update("ODA1", host.participant_id, {"paused": False, "position_seconds": 10.0})

    # 2 sn oynadıktan sonra beklenen konum 12 sn
    epoch_clock.advance(2_000)
    assert store.is_progress_tick("ODA1", {"position_seconds": 12.3, "paused": False, "rate": 1.0})

    # Ayrık olaylar kısılmaz
    assert not store.is_progress_tick("ODA1", {"position_seconds": 12.0, "paused": True})
    assert not store.is_progress_tick("ODA1", {"position_seconds": 12.0, "rate": 1.5})
    assert not store.is_progress_tick("ODA1", {"position_seconds": 90.0, "paused": False})
    assert not store.is_progress_tick("YOK", {"position_seconds": 12.0})
