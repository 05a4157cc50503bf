# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI    import konsol, cikis_yap, hata_yakala
from Client import SyncClient, Correction, PROGRESS_INTERVAL
import argparse, asyncio

def argumanlar() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Ekransız senkron izleyici")
    parser.add_argument("--url",     default="ws://127.0.0.1:3310/wss/sync_party", help="websocket adresi")
    parser.add_argument("--room",    required=True, help="oda kimliği")
    parser.add_argument("--name",    default="Izleyici", help="görünen ad")
    parser.add_argument("--host",    action="store_true", help="host rolünü iste ve zaman çizelgesini sür")
    parser.add_argument("--content", default=None, help="host iken yüklenecek içerik kimliği")
    return parser.parse_args()

def raporla(correction: Correction):
    konsol.log(
        f"[cyan]{correction.action.value:<9}[/]"
        f" [blue]fark:[/] {correction.diff:+.2f} sn"
        f" [blue]hız:[/] {correction.rate:.2f}"
        f" [blue]duraklat:[/] {correction.paused}"
    )

async def ilerleme_dongusu(client: SyncClient):
    """Tarayıcıdaki timeupdate yerine periyodik tick"""
    while True:
        await asyncio.sleep(PROGRESS_INTERVAL / 2)
        client.player.tick()

async def host_ol(client: SyncClient, content: str | None):
    """Katılım onaylanınca host iste, içerik hazır olunca oynat"""
    while client.participant_id is None:
        await asyncio.sleep(0.1)

    client.request_host()
    if content:
        client.set_video(content)

    while client.session.status != "ready" or client.session.suppressing:
        await asyncio.sleep(0.1)

    client.player.play()
    konsol.log(f"[green]Host olarak oynatılıyor:[/] {client.player.content_id}")

async def calistir(args: argparse.Namespace):
    client = SyncClient(args.url, args.room, args.name, on_correction=raporla)

    tasks = [asyncio.create_task(ilerleme_dongusu(client))]
    if args.host:
        tasks.append(asyncio.create_task(host_ol(client, args.content)))

    try:
        await client.run()
    finally:
        for task in tasks:
            task.cancel()

if __name__ == "__main__":
    try:
        asyncio.run(calistir(argumanlar()))
        cikis_yap(False)
    except Exception as hata:
        hata_yakala(hata)
