# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI                     import konsol
from Libs                    import global_request, GlobalClient, ContentUnavailable
from Public.WebSocket.Models import epoch_ms
from .signing                import build_signed_url
from .ytdlp_service          import ytdlp_extract_video_info
from dataclasses             import dataclass
from datetime                import datetime
from pathlib                 import Path
from typing                  import Callable
from urllib.parse            import quote, urlparse, parse_qs
import abc, re, httpx

CONTENT_ID_RE = re.compile(r"^[A-Za-z0-9_-]{1,64}$")

@dataclass
class MediaAccess:
    """Zaman sınırlı oynatma erişimi"""
    url        : str
    expires_at : int | None   # epoch ms
    access_key : str          # arka ucun kendi depolama anahtarı
    name       : str        = ""
    size       : int | None = None
    status     : str        = "ready"

@dataclass
class MediaItem:
    """Katalog satırı"""
    content_id    : str
    name          : str
    size          : int | None
    last_modified : int | None
    status        : str = "ready"

    def public(self) -> dict:
        return {
            "contentId"    : self.content_id,
            "name"         : self.name,
            "size"         : self.size,
            "lastModified" : self.last_modified,
            "status"       : self.status,
        }

class MediaBackend(abc.ABC):
    """İçerik kimliği → oynatılabilir URL"""

    @abc.abstractmethod
    async def resolve_playable_url(self, content_id: str) -> MediaAccess:
        """Çözülemezse ContentUnavailable fırlatır"""

    async def list_content(self, limit: int) -> list[MediaItem]:
        return []

class LocalMediaBackend(MediaBackend):
    """
    `MEDIA_DIR/<contentId>/<dosya>` düzenindeki yerel kataloğu
    HMAC imzalı, süreli `/media/...` URL'leriyle sunar.
    """

    def __init__(self, root: Path, secret: str, expiry_seconds: int, public_url: str = "", clock: Callable[[], int] = epoch_ms):
        self.root           = Path(root)
        self.secret         = secret
        self.expiry_seconds = expiry_seconds
        self.public_url     = public_url
        self.clock          = clock

    def find(self, content_id: str) -> Path | None:
        """İçerik klasöründeki ilk medya dosyası"""
        if not CONTENT_ID_RE.match(content_id or ""):
            return None

        klasor = self.root / content_id
        if not klasor.is_dir():
            return None

        dosyalar = sorted(p for p in klasor.iterdir() if p.is_file() and not p.name.startswith("."))
        return dosyalar[0] if dosyalar else None

    async def resolve_playable_url(self, content_id: str) -> MediaAccess:
        dosya = self.find(content_id)
        if not dosya:
            raise ContentUnavailable(content_id, "yerel katalogda yok")

        expires = (self.clock() // 1000) + self.expiry_seconds
        return MediaAccess(
            url        = build_signed_url(self.public_url, content_id, dosya.name, expires, self.secret),
            expires_at = expires * 1000,
            access_key = f"{content_id}/{dosya.name}",
            name       = dosya.name,
            size       = dosya.stat().st_size,
        )

    async def list_content(self, limit: int) -> list[MediaItem]:
        if not self.root.is_dir():
            return []

        items = []
        for klasor in sorted(self.root.iterdir()):
            if len(items) >= limit:
                break

            if not klasor.is_dir():
                continue

            dosya = self.find(klasor.name)
            if not dosya:
                continue

            stat = dosya.stat()
            items.append(MediaItem(
                content_id    = klasor.name,
                name          = dosya.name,
                size          = stat.st_size,
                last_modified = int(stat.st_mtime * 1000),
            ))

        return items

def parse_expiry(value) -> int | None:
    """ISO-8601 metin veya epoch ms → epoch ms"""
    if value is None or value == "":
        return None

    if isinstance(value, (int, float)):
        return int(value)

    try:
        return int(datetime.fromisoformat(str(value).replace("Z", "+00:00")).timestamp() * 1000)
    except ValueError:
        return None

class RemoteMediaBackend(MediaBackend):
    """Harici medya servisinin `/api/videos` uçlarını paylaşımlı httpx client ile çağırır."""

    def __init__(self, base_url: str, client: GlobalClient = global_request):
        self.base_url = base_url.rstrip("/")
        self.client   = client

    async def resolve_playable_url(self, content_id: str) -> MediaAccess:
        url = f"{self.base_url}/api/videos/{quote(content_id, safe='')}/playback"
        try:
            response = await self.client.fetch(url)
        except httpx.HTTPError as hata:
            raise ContentUnavailable(content_id, f"{type(hata).__name__} » {hata}") from hata

        if response.status_code != 200:
            raise ContentUnavailable(content_id, f"HTTP {response.status_code}")

        veri = response.json()
        if not veri.get("videoUrl"):
            raise ContentUnavailable(content_id, "videoUrl yok")

        return MediaAccess(
            url        = veri["videoUrl"],
            expires_at = parse_expiry(veri.get("expiresAt")),
            access_key = veri.get("videoId") or content_id,
            name       = veri.get("originalName") or "",
            size       = veri.get("size"),
        )

    async def list_content(self, limit: int) -> list[MediaItem]:
        try:
            veri = await self.client.fetch_json(f"{self.base_url}/api/videos", params={"limit": limit})
        except (httpx.HTTPError, ValueError) as hata:
            konsol.log(f"[yellow]Medya kataloğu alınamadı:[/] {type(hata).__name__} » {hata}")
            return []

        return [
            MediaItem(
                content_id    = item.get("videoId", ""),
                name          = item.get("originalName") or "",
                size          = item.get("size"),
                last_modified = item.get("lastModified"),
                status        = item.get("status") or "ready",
            )
            for item in veri.get("items", [])[:limit]
            if item.get("videoId")
        ]

class YtDlpMediaBackend(MediaBackend):
    """`http(s)://` sayfa URL'lerini yt-dlp ile stream URL'sine çevirir."""

    def __init__(self, ttl_seconds: int, clock: Callable[[], int] = epoch_ms):
        self.ttl_seconds = ttl_seconds
        self.clock       = clock

    def expiry_of(self, stream_url: str) -> int:
        """Stream URL'sindeki `expire` parametresi, yoksa TTL"""
        sorgu = parse_qs(urlparse(stream_url).query)
        for anahtar in ("expire", "expires"):
            deger = sorgu.get(anahtar)
            if deger and deger[0].isdigit():
                return int(deger[0]) * 1000

        return self.clock() + self.ttl_seconds * 1000

    async def resolve_playable_url(self, content_id: str) -> MediaAccess:
        info = await ytdlp_extract_video_info(content_id)
        if not info:
            raise ContentUnavailable(content_id, "yt-dlp çözemedi")

        return MediaAccess(
            url        = info["stream_url"],
            expires_at = self.expiry_of(info["stream_url"]),
            access_key = content_id,
            name       = info.get("title") or "Video",
            size       = info.get("filesize"),
        )

class MediaBackendChain(MediaBackend):
    """Sayfa URL'leri yt-dlp'ye, geri kalanı birincil arka uca"""

    def __init__(self, primary: MediaBackend, ytdlp: YtDlpMediaBackend | None = None):
        self.primary = primary
        self.ytdlp   = ytdlp

    def pick(self, content_id: str) -> MediaBackend:
        if self.ytdlp and content_id.startswith(("http://", "https://")):
            return self.ytdlp
        return self.primary

    async def resolve_playable_url(self, content_id: str) -> MediaAccess:
        return await self.pick(content_id).resolve_playable_url(content_id)

    async def list_content(self, limit: int) -> list[MediaItem]:
        return await self.primary.list_content(limit)
