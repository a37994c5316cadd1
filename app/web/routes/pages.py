from __future__ import annotations

import logging

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from app.constants import AI_FOOTER, LOADING_TEXT, OPTION_LABELS
from app.errors import QuizStateError
from app.services.quiz_controller import Phase
from app.web.core.deps import get_controller
from app.web.core.ratelimit import limiter

log = logging.getLogger(__name__)

router = APIRouter()

# seconds before a LOADING / ADVANCING page reloads itself
REFRESH_SECONDS = 1


def _back_home() -> RedirectResponse:
    return RedirectResponse("/", status_code=303)


@router.get("/", response_class=HTMLResponse)
@limiter.limit("120/minute")
async def quiz_page(request: Request):
    templates = request.app.state.templates
    ctrl = get_controller(request)
    snap = ctrl.snapshot()

    refresh = REFRESH_SECONDS if snap.phase in (Phase.LOADING, Phase.ADVANCING) else None
    progress_pct = int(round((snap.index + 1) / snap.total * 100)) if snap.total else 0

    return templates.TemplateResponse(
        request,
        "quiz.html",
        {
            "snap": snap,
            "phase": snap.phase.value,
            "labels": OPTION_LABELS,
            "refresh": refresh,
            "progress_pct": progress_pct,
            "loading_text": LOADING_TEXT,
            "footer": AI_FOOTER,
        },
    )


@router.post("/select")
@limiter.limit("60/minute")
async def select_page(request: Request, option: int = Form(...)):
    ctrl = get_controller(request)
    try:
        ctrl.select_option(option)
    except (QuizStateError, ValueError) as e:
        log.debug("Ignored select (%s): %s", option, e)
    return _back_home()


@router.post("/retry")
@limiter.limit("10/minute")
async def retry_page(request: Request):
    ctrl = get_controller(request)
    try:
        ctrl.retry()
    except QuizStateError as e:
        log.debug("Ignored retry: %s", e)
    return _back_home()


@router.post("/new")
@limiter.limit("10/minute")
async def new_quiz_page(request: Request):
    ctrl = get_controller(request)
    try:
        ctrl.new_quiz()
    except QuizStateError as e:
        log.debug("Ignored new quiz: %s", e)
    return _back_home()


@router.get("/healthz")
def healthz():
    return {"ok": True}
