from __future__ import annotations

import logging

from fastapi import APIRouter, Body, Request
from fastapi.responses import JSONResponse

from app.errors import QuizStateError
from app.web.core.deps import get_controller
from app.web.core.ratelimit import limiter

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/quiz", tags=["quiz"])


def _state(ctrl, status_code: int = 200) -> JSONResponse:
    return JSONResponse(ctrl.snapshot().to_dict(), status_code=status_code)


def _conflict(ctrl, e: Exception) -> JSONResponse:
    payload = ctrl.snapshot().to_dict()
    payload["error"] = str(e)
    return JSONResponse(payload, status_code=409)


@router.get("")
@limiter.limit("120/minute")
async def quiz_state(request: Request):
    return _state(get_controller(request))


@router.post("/select")
@limiter.limit("60/minute")
async def quiz_select(request: Request, payload: dict = Body(...)):
    ctrl = get_controller(request)

    option = payload.get("option")
    if isinstance(option, bool) or not isinstance(option, int):
        return JSONResponse({"error": "option must be an integer."}, status_code=400)

    try:
        ctrl.select_option(option)
    except QuizStateError as e:
        return _conflict(ctrl, e)
    except ValueError as e:
        return JSONResponse({"error": str(e)}, status_code=400)

    return _state(ctrl)


@router.post("/retry")
@limiter.limit("10/minute")
async def quiz_retry(request: Request):
    ctrl = get_controller(request)
    try:
        ctrl.retry()
    except QuizStateError as e:
        return _conflict(ctrl, e)
    return _state(ctrl)


@router.post("/new")
@limiter.limit("10/minute")
async def quiz_new(request: Request):
    ctrl = get_controller(request)
    try:
        ctrl.new_quiz()
    except QuizStateError as e:
        return _conflict(ctrl, e)
    return _state(ctrl)
