from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from phone_sms_api.dependencies import InboxDep, ListingCacheDep, SettingsDep
from phone_sms_api.mappers.classifier import format_iso
from phone_sms_api.mappers.results import (
    filter_by_country,
    group_countries,
    latest_otp,
    phone_from_id,
)
from phone_sms_api.ratelimit import enforce_rate_limit
from phone_sms_api.schemas.responses import (
    CountriesResponse,
    HealthResponse,
    MessagesResponse,
    NumbersResponse,
    OtpResponse,
    StatusResponse,
)

router = APIRouter(prefix="/api", dependencies=[Depends(enforce_rate_limit)])


def _phone_or_400(number_id: str) -> str:
    try:
        return phone_from_id(number_id)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(ok=True)


@router.get("/status", response_model=StatusResponse)
async def status(cache: ListingCacheDep, settings: SettingsDep) -> StatusResponse:
    numbers = await cache.get()
    return StatusResponse(
        ok=True,
        provider=settings.provider,
        available_numbers=len(numbers),
        timestamp=format_iso(datetime.now(timezone.utc)),
    )


@router.get("/numbers", response_model=NumbersResponse)
async def list_numbers(
    cache: ListingCacheDep,
    settings: SettingsDep,
    country: str | None = None,
) -> NumbersResponse:
    numbers = filter_by_country(await cache.get(), country)
    return NumbersResponse(provider=settings.provider, count=len(numbers), numbers=numbers)


@router.get("/countries", response_model=CountriesResponse)
async def list_countries(cache: ListingCacheDep, settings: SettingsDep) -> CountriesResponse:
    countries = group_countries(await cache.get())
    return CountriesResponse(provider=settings.provider, count=len(countries), countries=countries)


@router.get("/numbers/{number_id}/messages", response_model=MessagesResponse)
async def list_messages(number_id: str, inbox: InboxDep) -> MessagesResponse:
    phone = _phone_or_400(number_id)
    messages = await inbox.list_messages(phone)
    return MessagesResponse(phone=phone, count=len(messages), messages=messages)


@router.get(
    "/numbers/{number_id}/otp",
    response_model=OtpResponse,
    response_model_exclude_unset=True,
)
async def get_otp(number_id: str, inbox: InboxDep) -> OtpResponse:
    phone = _phone_or_400(number_id)
    messages = await inbox.list_messages(phone)
    return latest_otp(phone, messages)
