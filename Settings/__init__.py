# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from pathlib import Path
from yaml    import load, FullLoader
from dotenv  import load_dotenv
import os

KOK_DIZIN = Path(__file__).resolve().parent.parent

# .env yükleme
load_dotenv(dotenv_path=KOK_DIZIN / ".env")

# AYAR.yml yükleme
with open(KOK_DIZIN / "AYAR.yml", "r", encoding="utf-8") as yaml_dosyasi:
    AYAR = load(yaml_dosyasi, Loader=FullLoader)

# Genel ayarlar
PRODUCTION = os.getenv("PRODUCTION", "false").lower() == "true"

PROJE = AYAR["PROJE"]
HOST  = AYAR["APP"]["HOST"]
PORT  = AYAR["APP"]["PORT"]

# Senkron ayarları
REFRESH_BUFFER_MS = int(AYAR["SYNC"].get("REFRESH_BUFFER", 60)) * 1000
MAX_PAYLOAD       = int(AYAR["SYNC"].get("MAX_PAYLOAD", 64 * 1024))

# Güvenlik - yerel medya URL imzası
SECRET_KEY = os.getenv("SECRET_KEY", "cokomelli_secret")
PUBLIC_URL = os.getenv("PUBLIC_URL", "").rstrip("/")

# Medya arka ucu
MEDIA_BACKEND = os.getenv("MEDIA_BACKEND", "local").lower()
MEDIA_DIR     = Path(os.getenv("MEDIA_DIR", str(KOK_DIZIN / "media")))
MEDIA_API_URL = os.getenv("MEDIA_API_URL", "http://media_api:3000").rstrip("/")

# İmzalı oynatma URL'lerinin ömrü (en az 60 sn)
PLAYBACK_EXPIRY_SECONDS = max(int(os.getenv("PLAYBACK_EXPIRY_SECONDS", "3600") or 3600), 60)

YTDLP_ENABLED = os.getenv("YTDLP_ENABLED", "true").lower() == "true"
YTDLP_URL_TTL = int(os.getenv("YTDLP_URL_TTL", "3600"))

# Servis URL'leri
WS_URL = os.getenv("WS_URL", ":3310")
