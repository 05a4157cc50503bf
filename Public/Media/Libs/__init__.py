# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from Settings  import MEDIA_BACKEND, MEDIA_DIR, MEDIA_API_URL, SECRET_KEY, PUBLIC_URL, PLAYBACK_EXPIRY_SECONDS, YTDLP_ENABLED, YTDLP_URL_TTL
from .backends import MediaBackend, MediaAccess, MediaItem, LocalMediaBackend, RemoteMediaBackend, YtDlpMediaBackend, MediaBackendChain
from .resolver import MediaResolver

def build_media_backend() -> MediaBackend:
    """Ayarlardaki MEDIA_BACKEND'e göre arka uç zinciri"""
    if MEDIA_BACKEND == "remote":
        primary = RemoteMediaBackend(MEDIA_API_URL)
    else:
        primary = LocalMediaBackend(MEDIA_DIR, SECRET_KEY, PLAYBACK_EXPIRY_SECONDS, PUBLIC_URL)

    ytdlp = YtDlpMediaBackend(YTDLP_URL_TTL) if YTDLP_ENABLED else None
    return MediaBackendChain(primary, ytdlp)

media_resolver = MediaResolver(build_media_backend())
