import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from roombook.api.v1.catalog import router as catalog_router
from roombook.api.v1.drafts import router as drafts_router
from roombook.core.config import settings
from roombook.wiring.dependencies import get_booking_api, get_draft_store

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("draft_id", "seq", "room_id", "booking_id", "code", "status", "method", "path", "error"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    get_draft_store().close_all()
    await get_booking_api().aclose()


app = FastAPI(title=settings.APP_TITLE, version="1.0.0", lifespan=lifespan)

app.include_router(catalog_router, prefix="/api/v1", tags=["catalog"])
app.include_router(drafts_router, prefix="/api/v1", tags=["drafts"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
