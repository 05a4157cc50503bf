# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .Networking import global_request, GlobalClient
from .Errors     import SyncError, ContentUnavailable, UnauthorizedAction, StaleAuthority, LoadTimeout
