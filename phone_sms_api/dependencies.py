from typing import Annotated

from fastapi import Depends, Request

from phone_sms_api.cache import ListingCache
from phone_sms_api.config import Settings
from phone_sms_api.services.inbox import InboxService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_listing_cache(request: Request) -> ListingCache:
    return request.app.state.listing_cache


def get_inbox_service(request: Request) -> InboxService:
    return request.app.state.inbox_service


SettingsDep = Annotated[Settings, Depends(get_settings)]
ListingCacheDep = Annotated[ListingCache, Depends(get_listing_cache)]
InboxDep = Annotated[InboxService, Depends(get_inbox_service)]
