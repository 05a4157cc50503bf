# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI         import konsol
from Core        import kekik_FastAPI, Request, JSONResponse
from Settings    import PRODUCTION
from time        import time
from user_agents import parse
import asyncio

ISTEK_TIMEOUT = 30
LOGSUZ_YOLLAR = ("/media/", "/api/v1/health", "/favicon.ico")

def cihaz_adi(ua_header: str | None) -> str:
    """User-Agent → okunur cihaz/tarayıcı adı"""
    if not ua_header:
        return "-"

    try:
        parsed = parse(ua_header)
        return ua_header if parsed.browser.family == "Other" else str(parsed)
    except Exception:
        return ua_header

def istemci_ip(request: Request) -> str:
    fw_for = request.headers.get("X-Forwarded-For")
    if fw_for:
        return fw_for.split(",")[0].strip()
    return request.client.host if request.client else "-"

@kekik_FastAPI.middleware("http")
async def istekten_once_sonra(request: Request, call_next):
    baslangic_zamani = time()

    try:
        response = await asyncio.wait_for(call_next(request), timeout=ISTEK_TIMEOUT)
        kod      = response.status_code
    except asyncio.TimeoutError:
        kod      = 504
        response = JSONResponse(status_code=504, content={"ups": "Zaman Aşımı.."})
        konsol.log(f"[red]⏱️ Timeout:[/] {request.url.path} - {ISTEK_TIMEOUT}sn aşıldı")
    except asyncio.CancelledError:
        konsol.log(f"[yellow]🚫 İstemci bağlantıyı kapattı:[/] {request.url.path}")
        raise
    except Exception as exc:
        kod      = 500
        icerik   = {"ups": "Sunucu Hatası.."} if PRODUCTION else {"ups": "Sunucu Hatası..", "hata": f"{type(exc).__name__}: {exc}"}
        response = JSONResponse(status_code=500, content=icerik)
        konsol.log(f"[red]❌ Beklenmeyen hata:[/] {request.url.path} - {exc}")

    if request.url.path.startswith(LOGSUZ_YOLLAR):
        return response

    sure = round(time() - baslangic_zamani, 2)
    konsol.log(
        f"[bold blue]»[/] [bold turquoise2]{request.method} {request.url.path}[/]"
        f" [blue]-[/] [bold bright_yellow]{kod}[/]"
        f" [blue]-[/] [bold yellow2]{sure} sn[/]"
        f" [blue]|[/] [bold red]{istemci_ip(request)}[/]"
        f" [blue]|[/] [magenta]{cihaz_adi(request.headers.get('User-Agent'))}[/]"
    )

    return response
