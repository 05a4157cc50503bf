# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from Core                 import kekik_FastAPI, Request, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from pydantic             import ValidationError
from Libs                 import ContentUnavailable

@kekik_FastAPI.exception_handler(StarletteHTTPException)
async def custom_http_exception_handler(request: Request, exc):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

@kekik_FastAPI.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: ValidationError):
    """Pydantic validation hatalarını JSON olarak döndür"""
    messages = [f"{e['loc'][0]}: {e['msg']}" for e in exc.errors()]

    return JSONResponse(
        status_code = 422,
        content     = {"success": False, "message": " | ".join(messages)}
    )

@kekik_FastAPI.exception_handler(ContentUnavailable)
async def content_unavailable_handler(request: Request, exc: ContentUnavailable):
    """Çözülemeyen içerik → 404"""
    return JSONResponse(
        status_code = 404,
        content     = {"success": False, "message": f"İçerik bulunamadı: {exc.content_id}"}
    )
