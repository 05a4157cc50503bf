# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI        import konsol
from fastapi    import FastAPI
from contextlib import asynccontextmanager
from Libs       import global_request
from Settings   import MEDIA_BACKEND

@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI lifespan events - startup ve shutdown"""
    await global_request.start()
    konsol.log(f"[green]Paylaşımlı HTTP client hazır. Medya arka ucu:[/] {MEDIA_BACKEND}")

    try:
        yield
    finally:
        await global_request.stop()
