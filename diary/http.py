# diary/http.py
from __future__ import annotations

import datetime as _dt
import logging
import uuid
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request, Response
from fastapi.responses import JSONResponse

from diary.config import Settings, settings as default_settings
from diary.db import init_db, make_engine, make_sessionmaker
from diary.logging_setup import clear_log_context, set_log_context
from diary.schemas import (
    ChartDataPoint,
    DailyStat,
    DiaryCreateIn,
    DiaryEntry,
    DiaryFields,
    EmotionMark,
    RiskOut,
    SearchParams,
    SearchResult,
    SupportCategory,
    SupportResource,
)
from diary.seed import seed_demo
from diary.services import charts, risk, search as search_svc
from diary.services.diary_repo import DiaryRepository, MemoryDiaryRepository, SqlDiaryRepository
from diary.services.emotions import EmotionCategory
from diary.services.errors import EntryNotFound, RepositoryError, ValidationError
from diary.services.support import list_categories, list_resources

log = logging.getLogger(__name__)

YEAR_MONTH = r"^\d{4}-(0[1-9]|1[0-2])$"


def get_repo(request: Request) -> DiaryRepository:
    return request.app.state.repository


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


# -------------------- diaries --------------------

diaries = APIRouter(prefix="/diaries", tags=["diaries"])


@diaries.post("", response_model=DiaryEntry, status_code=201)
async def create_diary(body: DiaryCreateIn, repo: DiaryRepository = Depends(get_repo)) -> DiaryEntry:
    fields = DiaryFields(**body.model_dump(exclude={"date"}))
    entry = await repo.create(body.date, fields)
    log.info("diary created", extra={"date": entry.date, "entry_id": entry.id})
    return entry


@diaries.get("/details", response_model=DiaryEntry)
async def get_diary(
    date: _dt.date = Query(...),
    repo: DiaryRepository = Depends(get_repo),
) -> DiaryEntry:
    entry = await repo.get(date.isoformat())
    if entry is None:
        raise HTTPException(status_code=404, detail=f"no diary entry at {date}")
    return entry


@diaries.patch("/{entry_id}", response_model=DiaryEntry)
async def update_diary(
    entry_id: str,
    body: DiaryFields,
    date: _dt.date = Query(...),
    repo: DiaryRepository = Depends(get_repo),
) -> DiaryEntry:
    entry = await repo.update(entry_id, date.isoformat(), body)
    log.info("diary updated", extra={"date": entry.date, "entry_id": entry_id})
    return entry


@diaries.delete("/{entry_id}", status_code=204)
async def delete_diary(
    entry_id: str,
    date: _dt.date = Query(...),
    repo: DiaryRepository = Depends(get_repo),
) -> Response:
    await repo.delete(entry_id, date.isoformat())
    log.info("diary deleted", extra={"date": date.isoformat(), "entry_id": entry_id})
    return Response(status_code=204)


@diaries.get("/heatmap", response_model=List[EmotionMark])
async def heatmap(
    month: str = Query(..., pattern=YEAR_MONTH),
    repo: DiaryRepository = Depends(get_repo),
) -> List[EmotionMark]:
    return await repo.list_by_month(month)


@diaries.get("/search", response_model=SearchResult)
async def search_diaries(
    keyword: Optional[str] = None,
    start_date: Optional[_dt.date] = None,
    end_date: Optional[_dt.date] = None,
    emotion_category: Optional[EmotionCategory] = None,
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
    repo: DiaryRepository = Depends(get_repo),
    cfg: Settings = Depends(get_settings),
) -> SearchResult:
    params = SearchParams(
        keyword=keyword,
        start_date=start_date.isoformat() if start_date else None,
        end_date=end_date.isoformat() if end_date else None,
        emotion_category=emotion_category,
        page=page,
        limit=limit or cfg.search_page_limit,
    )
    return await search_svc.search(repo, params)


# -------------------- stats --------------------

stats = APIRouter(prefix="/stats", tags=["stats"])


@stats.get("/daily", response_model=List[DailyStat])
async def daily(
    month: str = Query(..., pattern=YEAR_MONTH),
    repo: DiaryRepository = Depends(get_repo),
) -> List[DailyStat]:
    return await charts.month_stats(repo, month)


@stats.get("/chart", response_model=List[ChartDataPoint])
async def chart(
    start: _dt.date,
    end: _dt.date,
    granularity: str = Query("weekly", alias="type"),
    repo: DiaryRepository = Depends(get_repo),
) -> List[ChartDataPoint]:
    return await charts.aggregate(repo, start.isoformat(), end.isoformat(), granularity)


# -------------------- risk / support --------------------

support = APIRouter(tags=["support"])


@support.get("/risk", response_model=RiskOut)
async def risk_check(
    days: Optional[int] = Query(None, ge=1, le=90),
    today: Optional[_dt.date] = None,
    repo: DiaryRepository = Depends(get_repo),
    cfg: Settings = Depends(get_settings),
) -> RiskOut:
    window_days = days or cfg.risk_window_days
    result = await risk.assess(repo, today, window_days)
    resources = list_resources() if result.is_at_risk else []
    return RiskOut(**result.model_dump(), window_days=window_days, resources=resources)


@support.get("/support-resources", response_model=List[SupportResource])
async def support_resources(
    category: Optional[str] = None,
) -> List[SupportResource]:
    return list_resources(category)


@support.get("/support-resources/categories", response_model=List[SupportCategory])
async def support_categories() -> List[SupportCategory]:
    return list_categories()


# -------------------- app --------------------

def _error(status: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status, content={"detail": str(exc)})


def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[DiaryRepository] = None,
) -> FastAPI:
    cfg = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = None
        repo = repository
        if repo is None and cfg.store == "sql":
            engine = make_engine(cfg.database_url, echo=cfg.debug)
            await init_db(engine)
            repo = SqlDiaryRepository(make_sessionmaker(engine), user_id=cfg.user_id)
        elif repo is None:
            repo = MemoryDiaryRepository()

        app.state.repository = repo
        app.state.settings = cfg
        if cfg.seed_demo:
            await seed_demo(repo)
        log.info("diary service started (store=%s, env=%s)", type(repo).__name__, cfg.environment)
        try:
            yield
        finally:
            if engine is not None:
                await engine.dispose()
            log.info("diary service stopped")

    # interactive docs stay off in production
    app = FastAPI(
        title="Diary Analytics",
        lifespan=lifespan,
        docs_url=None if cfg.is_prod else "/docs",
        redoc_url=None if cfg.is_prod else "/redoc",
        openapi_url=None if cfg.is_prod else "/openapi.json",
    )

    @app.middleware("http")
    async def _request_context(request: Request, call_next):
        rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
        set_log_context(request_id=rid, user_id=cfg.user_id)
        try:
            resp = await call_next(request)
        finally:
            clear_log_context()
        resp.headers["X-Request-ID"] = rid
        return resp

    @app.exception_handler(EntryNotFound)
    async def _not_found(request: Request, exc: EntryNotFound):
        log.info("entry not found: %s", exc)
        return _error(404, exc)

    @app.exception_handler(ValidationError)
    async def _invalid(request: Request, exc: ValidationError):
        log.info("rejected input: %s", exc)
        return _error(422, exc)

    @app.exception_handler(RepositoryError)
    async def _storage(request: Request, exc: RepositoryError):
        log.error("storage failure: %s", exc)
        return _error(503, exc)

    @app.get("/health")
    async def health():
        return {"ok": True}

    app.include_router(diaries)
    app.include_router(stats)
    app.include_router(support)
    return app
