# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from Core                    import HTTPException, FileResponse
from Settings                import SECRET_KEY, MEDIA_DIR
from .                       import media_router
from ..Libs.signing          import verify
from ..Libs.backends         import CONTENT_ID_RE
from time                    import time
import mimetypes

@media_router.get("/{content_id}/{filename}")
@media_router.head("/{content_id}/{filename}")
async def media_stream(content_id: str, filename: str, expires: int = 0, signature: str = ""):
    """İmzalı ve süreli yerel medya dosyası (Range destekli)"""
    sonuc = verify(content_id, filename, expires, signature, SECRET_KEY, int(time()))
    if sonuc == "bad_signature":
        raise HTTPException(status_code=403, detail="Geçersiz imza")
    if sonuc == "expired":
        raise HTTPException(status_code=410, detail="Bağlantının süresi doldu")

    if not CONTENT_ID_RE.match(content_id) or filename.startswith("."):
        raise HTTPException(status_code=404, detail="Bulunamadı")

    dosya = MEDIA_DIR / content_id / filename
    if not dosya.is_file():
        raise HTTPException(status_code=404, detail="Bulunamadı")

    media_type, _ = mimetypes.guess_type(dosya.name)
    return FileResponse(path=dosya, media_type=media_type or "application/octet-stream")
