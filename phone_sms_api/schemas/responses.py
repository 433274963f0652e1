from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from phone_sms_api.schemas.sms import Message, PhoneNumber


class HealthResponse(BaseModel):
    ok: bool = True


class StatusResponse(BaseModel):
    ok: bool
    provider: str
    available_numbers: int
    timestamp: str


class NumbersResponse(BaseModel):
    provider: str
    count: int
    numbers: list[PhoneNumber]


class MessagesResponse(BaseModel):
    phone: str
    count: int
    messages: list[Message]


class OtpResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    phone: str
    otp: str | None = None
    from_: str | None = Field(default=None, alias="from")
    time: str | None = None
    message: str | None = None  # set only when no OTP was found


class CountryCount(BaseModel):
    country: str
    code: str
    count: int


class CountriesResponse(BaseModel):
    provider: str
    count: int
    countries: list[CountryCount]
