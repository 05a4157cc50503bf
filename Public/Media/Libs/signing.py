# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from urllib.parse import quote
import hmac, hashlib

def sign(content_id: str, filename: str, expires: int, secret: str) -> str:
    """`contentId/dosya:expires` üzerinden HMAC-SHA256 imza"""
    mesaj = f"{content_id}/{filename}:{expires}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), mesaj, hashlib.sha256).hexdigest()

def build_signed_url(base_url: str, content_id: str, filename: str, expires: int, secret: str) -> str:
    imza = sign(content_id, filename, expires, secret)
    return f"{base_url}/media/{quote(content_id)}/{quote(filename)}?expires={expires}&signature={imza}"

def verify(content_id: str, filename: str, expires: int, signature: str, secret: str, now_seconds: int) -> str:
    """
    İmzalı URL'yi doğrula.

    Returns:
        "ok" | "bad_signature" | "expired"
    """
    beklenen = sign(content_id, filename, expires, secret)
    if not hmac.compare_digest(beklenen, signature or ""):
        return "bad_signature"

    if now_seconds >= expires:
        return "expired"

    return "ok"
