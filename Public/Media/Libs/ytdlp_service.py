# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI import konsol
import asyncio, subprocess, json, yt_dlp

async def ytdlp_extract_video_info(url: str) -> dict | None:
    """
    Sayfa URL'sini yt-dlp ile doğrudan oynatılabilir stream URL'sine çevir.

    Önce simulate modunda extractor'ın URL'yi tanıyıp tanımadığına bakar
    (Generic extractor reddedilir), tanıyorsa tam çıkarımı alt süreçte yapar.

    Returns:
        {"title": str, "stream_url": str, "duration": float, "filesize": int | None}
        veya çözülemezse None
    """
    try:
        ydl_opts = {
            "simulate"     : True,
            "quiet"        : True,
            "no_warnings"  : True,
            "extract_flat" : True
        }

        # extract_info bloklayıcı, event loop'u tutmasın
        def _tani():
            with yt_dlp.YoutubeDL(ydl_opts) as ydl:
                return ydl.extract_info(url, download=False, process=False)

        info = await asyncio.to_thread(_tani)
        if not info or info.get("extractor_key") == "Generic":
            return None

        konsol.log(f"[cyan][ℹ] yt-dlp extractor: {info.get('extractor_key', 'Unknown')}[/cyan]")
        return await _extract_stream(url)

    except Exception as hata:
        konsol.log(f"[yellow][⚠] yt-dlp kontrol hatası: {hata}[/yellow]")
        return None

async def _extract_stream(url: str) -> dict | None:
    """yt-dlp -j ile tek progressive format seç"""
    cmd = [
        "yt-dlp",
        "--no-warnings",
        "--no-playlist",
        "-j",
        "-f", "best",
        "--format-sort", "proto:https",
        url
    ]

    try:
        process = await asyncio.create_subprocess_exec(*cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=30.0)
    except asyncio.TimeoutError:
        konsol.log(f"[red]yt-dlp timeout:[/] {url}")
        return None
    except FileNotFoundError:
        konsol.log("[red]yt-dlp bulunamadı![/] pip install yt-dlp")
        return None

    if process.returncode != 0:
        konsol.log(f"[red]yt-dlp error:[/] {stderr.decode() if stderr else 'Unknown error'}")
        return None

    try:
        info = json.loads(stdout.decode())
    except json.JSONDecodeError as hata:
        konsol.log(f"[red]yt-dlp JSON parse error:[/] {hata}")
        return None

    if not info.get("url"):
        return None

    return {
        "title"      : info.get("title", "Video"),
        "stream_url" : info["url"],
        "duration"   : info.get("duration") or 0,
        "filesize"   : info.get("filesize") or info.get("filesize_approx"),
    }
