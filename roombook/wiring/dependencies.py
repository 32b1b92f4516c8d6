from functools import lru_cache
import logging

from roombook.application.ports.booking_api import BookingApiPort
from roombook.application.ports.draft_store import DraftStorePort
from roombook.application.use_cases.error_presenter import ErrorPresenter
from roombook.application.use_cases.master_data import MasterDataLoader
from roombook.core.config import settings
from roombook.infrastructure.booking_api.http_client import HttpBookingApi
from roombook.infrastructure.booking_api.mock_booking_api import MockBookingApi
from roombook.infrastructure.store.memory_store import MemoryDraftStore


@lru_cache
def get_booking_api() -> BookingApiPort:
    logger = logging.getLogger(__name__)
    if not settings.BOOKING_API_BASE_URL:
        logger.info("Using MockBookingApi (BOOKING_API_BASE_URL not set, ENV=%s)", settings.ENV)
        return MockBookingApi()
    logger.info("Using HttpBookingApi base_url=%s", settings.BOOKING_API_BASE_URL)
    return HttpBookingApi()


@lru_cache
def get_master_data_loader() -> MasterDataLoader:
    return MasterDataLoader(get_booking_api())


@lru_cache
def get_draft_store() -> DraftStorePort:
    return MemoryDraftStore()


@lru_cache
def get_error_presenter() -> ErrorPresenter:
    return ErrorPresenter()

