# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from pydantic import BaseModel, ConfigDict, Field, FiniteFloat, field_validator

class _Inbound(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

class JoinRoom(_Inbound):
    room_id      : str = Field(alias="roomId", min_length=1, max_length=64)
    display_name : str = Field(default="Guest", alias="displayName", max_length=64)

    @field_validator("room_id")
    @classmethod
    def _strip_room_id(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("roomId boş olamaz")
        return value

    @field_validator("display_name")
    @classmethod
    def _default_name(cls, value: str) -> str:
        return value.strip() or "Guest"

class SetVideo(_Inbound):
    content_id : str         = Field(alias="contentId", min_length=1, max_length=2048)
    start_time : FiniteFloat = Field(default=0.0, alias="startTime")

class HostUpdate(_Inbound):
    # NaN / Infinity JSON'da geçerli olsa da state'e girmemeli
    position_seconds : FiniteFloat | None = Field(default=None, alias="positionSeconds")
    paused           : bool        | None = None
    rate             : FiniteFloat | None = None

    def partial(self) -> dict:
        """Sadece gönderilmiş alanlar"""
        return self.model_dump(exclude_none=True)
