# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI        import konsol
from Settings   import AYAR, HOST, PORT, MEDIA_BACKEND, MEDIA_DIR, MEDIA_API_URL, SECRET_KEY, PLAYBACK_EXPIRY_SECONDS, REFRESH_BUFFER_MS, YTDLP_ENABLED
from rich.table import Table
from rich       import box
from sys        import version_info
import uvicorn

def ayar_tablosu() -> Table:
    """Açılışta medya/senkron ayarlarının özeti"""
    tablo = Table(box=box.ROUNDED, show_header=False, border_style="blue", width=70)
    tablo.add_column(style="bold turquoise2")
    tablo.add_column(style="pale_green1")

    tablo.add_row("Medya arka ucu", MEDIA_BACKEND)
    tablo.add_row("Kaynak", str(MEDIA_DIR) if MEDIA_BACKEND == "local" else MEDIA_API_URL)
    tablo.add_row("URL ömrü", f"{PLAYBACK_EXPIRY_SECONDS} sn")
    tablo.add_row("Yenileme tamponu", f"{REFRESH_BUFFER_MS // 1000} sn")
    tablo.add_row("yt-dlp", "açık" if YTDLP_ENABLED else "kapalı")
    return tablo

def basla():
    surum = f"{version_info[0]}.{version_info[1]}"
    konsol.print(f"\n[bold gold1]{AYAR['PROJE']}[/] [yellow]:bird:[/] [turquoise2]Python {surum}[/] [bold yellow2]uvicorn[/]", width=70, justify="center")
    konsol.print(ayar_tablosu(), justify="center")

    if MEDIA_BACKEND == "local" and SECRET_KEY == "cokomelli_secret":
        konsol.log("[yellow]SECRET_KEY varsayılan değerde, imzalı medya bağlantıları tahmin edilebilir![/]")

    konsol.print(f"[red]{HOST}[light_coral]:[/]{PORT}[pale_green1] başlatılmıştır...[/]\n", width=70, justify="center")

    # Oda tablosu süreç belleğinde: tek worker zorunlu
    uvicorn.run("Core:kekik_FastAPI", host=HOST, port=PORT, proxy_headers=True, forwarded_allow_ips="*", workers=1, log_level="error")
