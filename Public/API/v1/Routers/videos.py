# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .                 import api_v1_router, api_v1_global_message
from Public.Media.Libs import media_resolver
from datetime          import datetime, timezone

@api_v1_router.get("/videos")
async def list_videos(limit: int = 50):
    """Medya kataloğu (salt okunur)"""
    limit = min(max(limit, 1), 200)
    items = await media_resolver.list_content(limit)

    return {**api_v1_global_message, "items": [item.public() for item in items]}

@api_v1_router.get("/videos/{content_id}/playback")
async def video_playback(content_id: str):
    """Tek içerik için süreli oynatma URL'si (ContentUnavailable → 404)"""
    access = await media_resolver.resolve(content_id)

    expires_at = None
    if access.expires_at is not None:
        expires_at = datetime.fromtimestamp(access.expires_at / 1000, tz=timezone.utc).isoformat()

    return {
        **api_v1_global_message,
        "contentId" : content_id,
        "videoUrl"  : access.url,
        "expiresAt" : expires_at,
        "name"      : access.name,
        "size"      : access.size,
    }
