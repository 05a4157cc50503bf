# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from Public.WebSocket.Libs import MessageHandler
from conftest              import FakeWebSocket, assert_host_invariant
import pytest

async def katil(manager, room_id: str, isim: str):
    ws      = FakeWebSocket()
    handler = MessageHandler(ws, manager)
    await handler.handle_join({"type": "join-room", "roomId": room_id, "displayName": isim})
    return ws, handler

async def test_join_sends_room_joined_and_announces(manager):
    ws_a, a = await katil(manager, "ODA1", "Alice")
    ws_b, b = await katil(manager, "ODA1", "Bob")

    joined = ws_a.of_type("room-joined")[0]
    assert joined["roomId"] == "ODA1"
    assert joined["hostId"] == a.participant.participant_id
    assert joined["participantId"] == a.participant.participant_id
    assert joined["state"] is None

    assert ws_b.of_type("room-joined")[0]["hostId"] == a.participant.participant_id
    assert ws_a.of_type("participant-joined") == [{
        "type"          : "participant-joined",
        "participantId" : b.participant.participant_id,
        "displayName"   : "Bob",
    }]
    assert ws_b.of_type("participant-joined") == []
    assert_host_invariant(manager)

async def test_set_video_broadcasts_content_changed_to_everyone(manager):
    ws_a, a = await katil(manager, "ODA1", "Alice")
    ws_b, _ = await katil(manager, "ODA1", "Bob")

    await a.handle_set_video({"type": "set-video", "contentId": "vid1"})

    for ws in (ws_a, ws_b):
        state = ws.of_type("content-changed")[0]["state"]
        assert state["contentId"] == "vid1"
        assert state["paused"] is True
        assert state["positionSeconds"] == 0.0
        assert state["rate"] == 1.0
        assert "accessKey" not in state and "access_key" not in state

async def test_late_joiner_gets_current_state(manager, epoch_clock):
    _, a = await katil(manager, "ODA1", "Alice")
    await a.handle_set_video({"type": "set-video", "contentId": "vid1"})

    epoch_clock.advance(1_000)
    await a.handle_host_update({"type": "host-update", "positionSeconds": 100.0, "paused": False, "rate": 1.0})

    ws_c, _ = await katil(manager, "ODA1", "Carol")
    state   = ws_c.of_type("room-joined")[0]["state"]

    assert state["contentId"] == "vid1"
    assert state["positionSeconds"] == 100.0
    assert state["paused"] is False

async def test_host_update_reaches_everyone_but_host(manager):
    ws_a, a = await katil(manager, "ODA1", "Alice")
    ws_b, _ = await katil(manager, "ODA1", "Bob")
    await a.handle_set_video({"type": "set-video", "contentId": "vid1"})

    await a.handle_host_update({"type": "host-update", "positionSeconds": 12.0, "paused": False})

    assert ws_a.of_type("state-update") == []
    update = ws_b.of_type("state-update")[0]["state"]
    assert update["positionSeconds"] == 12.0 and update["paused"] is False

async def test_viewer_actions_are_dropped_silently(manager, backend):
    ws_a, _ = await katil(manager, "ODA1", "Alice")
    ws_b, b = await katil(manager, "ODA1", "Bob")
    onceki  = (list(ws_a.sent), list(ws_b.sent))

    await b.handle_set_video({"type": "set-video", "contentId": "vid1"})
    await b.handle_host_update({"type": "host-update", "paused": False})

    assert backend.calls == []
    assert (ws_a.sent, ws_b.sent) == onceki
    assert manager.registry.get("ODA1").state is None

async def test_unavailable_content_errors_only_to_requester(manager):
    ws_a, a = await katil(manager, "ODA1", "Alice")
    ws_b, _ = await katil(manager, "ODA1", "Bob")
    await a.handle_set_video({"type": "set-video", "contentId": "vid1"})
    onceki = manager.registry.get("ODA1").state

    await a.handle_set_video({"type": "set-video", "contentId": "yok"})

    assert ws_a.of_type("error")[-1]["message"] == "İçerik oynatılamıyor: yok"
    assert ws_b.of_type("error") == []
    assert manager.registry.get("ODA1").state is onceki

async def test_request_host_broadcasts_and_sends_state(manager):
    ws_a, a = await katil(manager, "ODA1", "Alice")
    ws_b, b = await katil(manager, "ODA1", "Bob")
    await a.handle_set_video({"type": "set-video", "contentId": "vid1"})

    await b.handle_request_host()

    for ws in (ws_a, ws_b):
        assert ws.of_type("host-changed") == [{"type": "host-changed", "hostId": b.participant.participant_id}]

    assert ws_b.of_type("state-update")[0]["state"]["contentId"] == "vid1"
    assert ws_a.of_type("state-update") == []

    # Eski host artık yazamaz
    await a.handle_host_update({"type": "host-update", "paused": False})
    assert manager.registry.get("ODA1").state.paused is True

async def test_request_host_by_current_host_echoes_to_requester(manager):
    ws_a, a = await katil(manager, "ODA1", "Alice")
    ws_b, _ = await katil(manager, "ODA1", "Bob")
    jenerasyon = manager.registry.get("ODA1").generation

    await a.handle_request_host()

    assert ws_a.of_type("host-changed") == [{"type": "host-changed", "hostId": a.participant.participant_id}]
    assert ws_b.of_type("host-changed") == []
    assert manager.registry.get("ODA1").generation == jenerasyon

async def test_host_disconnect_hands_over_and_resends_state(manager):
    ws_a, a = await katil(manager, "ODA1", "Alice")
    ws_b, b = await katil(manager, "ODA1", "Bob")
    ws_c, c = await katil(manager, "ODA1", "Carol")
    await a.handle_set_video({"type": "set-video", "contentId": "vid1"})
    ayrilan = a.participant.participant_id

    await a.handle_disconnect()

    for ws in (ws_b, ws_c):
        assert {"type": "participant-left", "participantId": ayrilan} in ws.sent
        assert ws.of_type("host-changed")[-1]["hostId"] == b.participant.participant_id
        assert ws.of_type("state-update")[-1]["state"]["contentId"] == "vid1"

    # participant-left, host-changed'den önce gelir
    tipler = ws_c.types()
    assert tipler.index("participant-left") < tipler.index("host-changed") < tipler.index("state-update")
    assert_host_invariant(manager)

    # Yeni host yazabilir, ayrılan host artık odada değil
    await b.handle_host_update({"type": "host-update", "positionSeconds": 7.0, "paused": False})
    assert ws_c.of_type("state-update")[-1]["state"]["positionSeconds"] == 7.0
    assert manager.registry.authorize("ODA1", ayrilan) is None

async def test_viewer_disconnect_only_announces_leave(manager):
    ws_a, a = await katil(manager, "ODA1", "Alice")
    _, b    = await katil(manager, "ODA1", "Bob")
    bob_id  = b.participant.participant_id

    await b.handle_disconnect()
    await b.handle_disconnect()

    assert ws_a.of_type("participant-left") == [{"type": "participant-left", "participantId": bob_id}]
    assert ws_a.of_type("host-changed") == []

async def test_last_leave_destroys_room_state(manager):
    _, a = await katil(manager, "ODA1", "Alice")
    await a.handle_set_video({"type": "set-video", "contentId": "vid1"})
    await a.handle_disconnect()

    assert manager.registry.get("ODA1") is None

    ws_b, _ = await katil(manager, "ODA1", "Bob")
    assert ws_b.of_type("room-joined")[0]["state"] is None

async def test_rejoin_moves_connection_between_rooms(manager):
    ws_a, a = await katil(manager, "ODA1", "Alice")
    ws_b, _ = await katil(manager, "ODA1", "Bob")
    ilk_id  = a.participant.participant_id

    await a.handle_join({"type": "join-room", "roomId": "ODA2", "displayName": "Alice"})

    assert a.participant.room_id == "ODA2"
    assert {"type": "participant-left", "participantId": ilk_id} in ws_b.sent
    assert manager.registry.get("ODA2").host_id == a.participant.participant_id
    assert_host_invariant(manager)

async def test_invalid_messages_get_error_frames(manager):
    ws = FakeWebSocket()
    handler = MessageHandler(ws, manager)

    await handler.handle_join({"type": "join-room", "roomId": "   "})
    await handler.handle_join({"type": "join-room"})

    assert len(ws.of_type("error")) == 2
    assert handler.participant is None

async def test_stale_refresh_applies_before_every_send(manager, backend, epoch_clock):
    ws_a, a = await katil(manager, "ODA1", "Alice")
    await a.handle_set_video({"type": "set-video", "contentId": "vid1"})
    ilk_url = ws_a.of_type("content-changed")[0]["state"]["videoUrl"]

    epoch_clock.advance(backend.ttl_ms - 30_000)
    ws_b, _ = await katil(manager, "ODA1", "Bob")

    yeni_url = ws_b.of_type("room-joined")[0]["state"]["videoUrl"]
    assert yeni_url != ilk_url
    assert backend.calls == ["vid1", "vid1"]

async def test_room_snapshot(manager):
    _, a = await katil(manager, "ODA1", "Alice")
    _, b = await katil(manager, "ODA1", "Bob")

    snapshot = await manager.get_room_snapshot("ODA1")

    assert snapshot["hostId"] == a.participant.participant_id
    assert [p["displayName"] for p in snapshot["participants"]] == ["Alice", "Bob"]
    assert [p["isHost"] for p in snapshot["participants"]] == [True, False]
    assert snapshot["state"] is None
    assert await manager.get_room_snapshot("YOK") is None

@pytest.mark.parametrize("mesaj", [
    {"type": "set-video"},
    {"type": "set-video", "contentId": ""},
])
async def test_set_video_validation(manager, backend, mesaj):
    ws_a, a = await katil(manager, "ODA1", "Alice")
    await a.handle_set_video(mesaj)

    assert ws_a.of_type("error")
    assert backend.calls == []

@pytest.mark.parametrize("mesaj", [
    {"type": "host-update", "positionSeconds": float("nan")},
    {"type": "host-update", "positionSeconds": float("inf"), "paused": False},
    {"type": "host-update", "rate": float("-inf")},
])
async def test_non_finite_host_update_is_rejected(manager, mesaj):
    ws_a, a = await katil(manager, "ODA1", "Alice")
    ws_b, _ = await katil(manager, "ODA1", "Bob")
    await a.handle_set_video({"type": "set-video", "contentId": "vid1", "startTime": 5.0})
    onceki = manager.registry.get("ODA1").state.public()

    await a.handle_host_update(mesaj)

    assert ws_a.of_type("error")
    assert ws_b.of_type("state-update") == []
    assert manager.registry.get("ODA1").state.public() == onceki

async def test_non_finite_start_time_is_rejected(manager, backend):
    ws_a, a = await katil(manager, "ODA1", "Alice")
    await a.handle_set_video({"type": "set-video", "contentId": "vid1", "startTime": float("nan")})

    assert ws_a.of_type("error")
    assert backend.calls == []
    assert manager.registry.get("ODA1").state is None
