# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

class SyncError(Exception):
    """Senkron protokolü hatalarının tabanı"""

class ContentUnavailable(SyncError):
    """İçerik kimliği oynatılabilir bir URL'ye çözülemedi"""

    def __init__(self, content_id: str, reason: str = ""):
        self.content_id = content_id
        self.reason     = reason
        super().__init__(f"{content_id} » {reason}" if reason else content_id)

class UnauthorizedAction(SyncError):
    """Host olmayan katılımcı host'a özel bir işlem denedi"""

class StaleAuthority(SyncError):
    """Askıdaki işlem tamamlandığında host yetkisi çoktan değişmişti"""

class LoadTimeout(SyncError):
    """İzleyici, yüklenen oynatıcıya süresi içinde bağlanamadı"""
