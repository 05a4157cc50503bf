# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI      import konsol
from fastapi  import WebSocket, WebSocketDisconnect
from Settings import MAX_PAYLOAD
from .        import wss_router
from ..Libs   import MessageHandler
import json, time, asyncio

# Yüksek frekanslı host güncellemeleri ayrı kovada
HIGH_FREQ_OPS   = {"host-update"}
HIGH_FREQ_LIMIT = 30  # mesaj/sn
GENERAL_LIMIT   = 10  # mesaj/sn

class FloodGate:
    """Saniyelik iki kovalı mesaj sayacı"""

    def __init__(self):
        self.counts = {"high": 0, "general": 0}
        self.starts = {"high": time.perf_counter(), "general": time.perf_counter()}

    def allow(self, bucket: str, limit: int) -> bool:
        now = time.perf_counter()
        if now - self.starts[bucket] > 1.0:
            self.counts[bucket] = 0
            self.starts[bucket] = now

        self.counts[bucket] += 1
        return self.counts[bucket] <= limit

@wss_router.websocket("/sync_party")
async def sync_party_websocket(websocket: WebSocket):
    await websocket.accept()
    handler = MessageHandler(websocket)
    gate    = FloodGate()

    def log_task_exception(t: asyncio.Task):
        try:
            exc = t.exception()
        except asyncio.CancelledError:
            return
        if exc:
            konsol.log(f"[red]ws task error:[/] {exc}")

    # (needs_participant, takes_msg, background, fn)
    # set-video URL çözümü sürerken bağlantı döngüsü bloklanmasın
    handlers = {
        "join-room"    : (False, True,  False, handler.handle_join),
        "request-host" : (True,  False, False, handler.handle_request_host),
        "set-video"    : (True,  True,  True,  handler.handle_set_video),
        "host-update"  : (True,  True,  False, handler.handle_host_update),
    }

    try:
        while True:
            raw = await websocket.receive_text()

            if len(raw.encode("utf-8")) > MAX_PAYLOAD:
                await handler.send_error("Mesaj boyutu çok büyük")
                continue

            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                await handler.send_error("Geçersiz JSON formatı")
                continue

            if not isinstance(msg, dict):
                continue

            t = msg.get("type")
            if not t:
                continue

            if t in HIGH_FREQ_OPS:
                # Sadece ilerleme tick'leri sessizce düşer, sonraki tick güncel konumu taşır.
                # play / pause / seek / hız değişimi kovaya hiç girmez.
                if handler.is_progress_tick(msg) and not gate.allow("high", HIGH_FREQ_LIMIT):
                    continue
            elif not gate.allow("general", GENERAL_LIMIT):
                await handler.send_error("Çok hızlı işlem yapıyorsunuz")
                continue

            entry = handlers.get(t)
            if not entry:
                continue

            needs_participant, takes_msg, bg, fn = entry
            if needs_participant and not handler.participant:
                continue

            call = (lambda f=fn, m=msg: f(m)) if takes_msg else (lambda f=fn: f())

            if bg:
                task = asyncio.create_task(call())
                task.add_done_callback(log_task_exception)
            else:
                await call()

    except WebSocketDisconnect:
        pass
    except Exception as hata:
        konsol.log(f"[red]WebSocket Error:[/] {type(hata).__name__}: {hata}")
    finally:
        await handler.handle_disconnect()
