import logging
import time
from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import Annotated

from fastapi import Depends, FastAPI, Header, HTTPException
from pydantic import BaseModel

from versemem.application.classifier import classify
from versemem.application.config import resolve_config
from versemem.application.service import MemoryService
from versemem.consts import VERSION
from versemem.domain.errors import (
    DuplicateItem,
    InvalidItem,
    InvalidRating,
    ItemNotFound,
    StoreError,
    VerseMemError,
)
from versemem.domain.models import MemoryItem
from versemem.domain.ports import MemoryItemRepository
from versemem.infrastructure.adapters.factory import get_memory_service, get_repository

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("versemem.server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"versemem server v{VERSION} starting up...")
    yield
    # Shutdown
    repo = getattr(app.state, "repo", None)
    if repo is not None and hasattr(repo, "close"):
        repo.close()
    logger.info("versemem server shutting down...")


app = FastAPI(
    title="versemem",
    description="Spaced-repetition API for Scripture memory verses.",
    version=VERSION,
    lifespan=lifespan,
)

start_time = time.time()


# ---------- Models ----------


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


class VerseOut(BaseModel):
    id: str
    reference: str
    text: str
    translation: str
    status: str
    ease_factor: float
    interval: int
    repetitions: int
    next_review: str
    last_reviewed: str | None = None

    @classmethod
    def from_item(cls, item: MemoryItem) -> "VerseOut":
        return cls(
            id=item.id,
            reference=item.reference,
            text=item.content,
            translation=item.translation,
            status=classify(item).value,
            ease_factor=item.ease_factor,
            interval=item.interval,
            repetitions=item.repetitions,
            next_review=item.next_review_at.isoformat(),
            last_reviewed=item.last_reviewed_at.isoformat() if item.last_reviewed_at else None,
        )


class StatsOut(BaseModel):
    total: int
    mastered: int
    learning: int
    new: int


class VerseListResponse(BaseModel):
    verses: list[VerseOut]
    dueCount: int
    stats: StatsOut


class AddVerseRequest(BaseModel):
    reference: str
    text: str
    translation: str | None = None


class ReviewRequest(BaseModel):
    # Validated by the scheduler so out-of-range values surface as InvalidRating
    quality: int


class ReviewResponse(BaseModel):
    verse: VerseOut
    nextReview: str
    interval: int


class PreviewOut(BaseModel):
    rating: str
    quality: int
    interval: int
    label: str


# ---------- Dependencies ----------


def get_repo() -> MemoryItemRepository:
    """One store per process, created on first use."""
    if getattr(app.state, "repo", None) is None:
        app.state.repo = get_repository(resolve_config())
    return app.state.repo


def get_service(
    repo: Annotated[MemoryItemRepository, Depends(get_repo)],
    x_user_id: Annotated[str | None, Header()] = None,
) -> MemoryService:
    return get_memory_service(resolve_config(), repo=repo, user_id=x_user_id)


ServiceDep = Annotated[MemoryService, Depends(get_service)]


def _http_error(e: VerseMemError) -> HTTPException:
    if isinstance(e, ItemNotFound):
        return HTTPException(status_code=404, detail="Verse not found")
    if isinstance(e, (InvalidRating, InvalidItem, DuplicateItem)):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, StoreError):
        logger.error(f"Store failure: {e}", exc_info=True)
    return HTTPException(status_code=500, detail=str(e))


# ---------- Routes ----------


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)


@app.get("/version")
async def get_version():
    return {"version": VERSION}


@app.get("/verses", response_model=VerseListResponse)
async def list_verses(service: ServiceDep):
    """All verses for the user, with due count and mastery stats."""
    try:
        dashboard = await service.dashboard()
    except VerseMemError as e:
        raise _http_error(e) from e

    s = dashboard.stats
    return VerseListResponse(
        verses=[VerseOut.from_item(i) for i in dashboard.items],
        dueCount=dashboard.due_count,
        stats=StatsOut(total=s.total, mastered=s.mastered, learning=s.learning, new=s.new),
    )


@app.post("/verses")
async def add_verse(req: AddVerseRequest, service: ServiceDep):
    try:
        item = await service.add_item(req.reference, req.text, req.translation)
    except VerseMemError as e:
        raise _http_error(e) from e
    return {"verse": VerseOut.from_item(item)}


@app.patch("/verses/{item_id}/review", response_model=ReviewResponse)
async def review_verse(item_id: str, req: ReviewRequest, service: ServiceDep):
    """Apply one SM-2 review and persist the rescheduled verse."""
    try:
        item = await service.review_item(item_id, req.quality)
    except VerseMemError as e:
        raise _http_error(e) from e

    logger.info(f"Reviewed {item_id} q={req.quality} -> {item.interval}d")
    return ReviewResponse(
        verse=VerseOut.from_item(item),
        nextReview=item.next_review_at.isoformat(),
        interval=item.interval,
    )


@app.get("/verses/{item_id}/preview", response_model=list[PreviewOut])
async def preview_verse(item_id: str, service: ServiceDep):
    try:
        previews = await service.preview_item(item_id)
    except VerseMemError as e:
        raise _http_error(e) from e
    return [PreviewOut(**asdict(p)) for p in previews]


@app.delete("/verses/{item_id}")
async def delete_verse(item_id: str, service: ServiceDep):
    try:
        await service.remove_item(item_id)
    except VerseMemError as e:
        raise _http_error(e) from e
    return {"success": True}
