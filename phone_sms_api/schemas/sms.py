from pydantic import BaseModel, ConfigDict, Field


class PhoneNumber(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str  # digits only, 7-15 long
    phone: str  # "+" + id
    provider: str
    countryCode: str | None = None  # lower-case ISO code from the flag decoration
    country: str | None = None
    sourceUrl: str


class Message(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    from_: str = Field(alias="from")
    text: str
    otp: str | None = None
    time: str  # ISO-8601, UTC


class RawMessage(BaseModel):
    """Candidate produced by a layout strategy, before classification."""

    index: int
    strategy: str  # "primary" | "fallback"
    sender: str = ""
    text: str
    time: str | None = None  # None when the document carries no timestamp


class SessionCookie(BaseModel):
    """Cookie as exported by browser cookie editors."""

    name: str
    value: str
    domain: str | None = None
    path: str | None = None
    expirationDate: float | None = None
    secure: bool = False
    httpOnly: bool = False
    sameSite: str | None = None
