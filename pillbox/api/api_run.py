from fastapi import FastAPI, Request, Query, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response

from datetime import date as _date
from typing import Optional
import logging

from pillbox.api.dependencies import Household, get_household, get_today
from pillbox.api.routes import auth, intake, meds, stocks
from pillbox.domain.Plan import PlannerState
from pillbox.infra.pdf_utils import generate_pdf_for_export
from pillbox.infra.supabase_client import create_backend_client
from pillbox.logic.planner.week import build_rows
from pillbox.logic.reporting.export import build_export, render_html, render_text
from pillbox.utilities.config import Settings
from pillbox.utilities.errors import ConfigurationError, PillboxError

# Logging
logger = logging.getLogger("pillbox_app")

# Routes reachable without backend configuration
OPEN_PATHS = {"/", "/docs", "/openapi.json"}


def _planner_state(start: Optional[_date], today_only: bool, today: _date) -> PlannerState:
    return PlannerState(week_start=start, today_only=today_only, today=today)


def _load_view(household: Household, state: PlannerState):
    meds_now = household.catalog.list_active()
    first, last = state.date_range()
    intakes = household.tracker.load_range(first, last)
    return meds_now, intakes


def create_app(settings: Optional[Settings] = None, client_factory=create_backend_client,
               clock=_date.today) -> FastAPI:
    """Build the application.

    ``client_factory(settings, access_token)`` returns a backend client for
    one request; ``clock`` returns today's date.
    """
    settings = settings or Settings.from_env()
    app = FastAPI(title="Pillbox Medication Tracker API")
    app.state.settings = settings
    app.state.client_factory = client_factory
    app.state.clock = clock

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if not settings.is_configured:
        logger.error("Backend not configured, missing: %s", ", ".join(settings.missing()))

    @app.middleware("http")
    async def _require_configuration(request: Request, call_next):
        if not request.app.state.settings.is_configured and request.url.path not in OPEN_PATHS:
            try:
                request.app.state.settings.require()
            except ConfigurationError as e:
                return JSONResponse(status_code=e.status_code, content=e.to_dict())
        return await call_next(request)

    @app.exception_handler(PillboxError)
    async def _pillbox_error(request: Request, exc: PillboxError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    app.include_router(auth.router)
    app.include_router(meds.router)
    app.include_router(stocks.router)
    app.include_router(intake.router)

    @app.get("/")
    def root(request: Request):
        current = request.app.state.settings
        return {"message": "Pillbox API is running!", "configured": current.is_configured,
                "missing": current.missing()}

    # -------------------- Planner --------------------
    @app.get("/api/planner")
    def api_planner(start: Optional[_date] = Query(default=None, description="Any day of the week to show"),
                    today_only: bool = Query(default=False),
                    today: _date = Depends(get_today),
                    household: Household = Depends(get_household)):
        state = _planner_state(start, today_only, today)
        meds_now, intakes = _load_view(household, state)
        rows = build_rows(state.days(), meds_now, intakes)
        return {
            "window": state.to_dict(),
            "days": [d.isoformat() for d in state.days()],
            "has_meds": bool(meds_now),
            "rows": [r.to_dict() for r in rows],
        }

    # -------------------- Export --------------------
    def _export(start, today_only, today, household):
        state = _planner_state(start, today_only, today)
        meds_now, intakes = _load_view(household, state)
        return build_export(state, meds_now, intakes)

    @app.get("/export_pdf")
    def export_pdf(start: Optional[_date] = Query(default=None), today_only: bool = Query(default=False),
                   today: _date = Depends(get_today), household: Household = Depends(get_household)):
        doc = _export(start, today_only, today, household)
        pdf_bytes = generate_pdf_for_export(doc)
        filename = f"intake_{doc.sections[0].day.isoformat()}.pdf"
        return Response(
            content=pdf_bytes,
            media_type="application/pdf",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    @app.get("/export_html", response_class=HTMLResponse)
    def export_html(start: Optional[_date] = Query(default=None), today_only: bool = Query(default=False),
                    auto_print: bool = Query(default=True),
                    today: _date = Depends(get_today), household: Household = Depends(get_household)):
        doc = _export(start, today_only, today, household)
        return HTMLResponse(render_html(doc, auto_print=auto_print))

    @app.get("/export_text", response_class=PlainTextResponse)
    def export_text(start: Optional[_date] = Query(default=None), today_only: bool = Query(default=False),
                    today: _date = Depends(get_today), household: Household = Depends(get_household)):
        return PlainTextResponse(render_text(_export(start, today_only, today, household)))

    @app.get("/api/export")
    def export_json(start: Optional[_date] = Query(default=None), today_only: bool = Query(default=False),
                    today: _date = Depends(get_today), household: Household = Depends(get_household)):
        return _export(start, today_only, today, household).to_dict()

    return app


app = create_app()
