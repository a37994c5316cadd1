from __future__ import annotations

import logging
import os
import secrets
from collections import OrderedDict
from typing import Callable, Optional

from fastapi import Request
from fastapi.templating import Jinja2Templates

from config import ADVANCE_DELAY_MS, WEB_MAX_SESSIONS, WEB_SESSION_SECRET
from app.services.llm import make_llm_client
from app.services.quiz_controller import QuizController

log = logging.getLogger(__name__)

# -----------------------------
# Settings
# -----------------------------
SESSION_SECRET = WEB_SESSION_SECRET
MAX_CONTROLLERS = max(1, WEB_MAX_SESSIONS)

# -----------------------------
# Paths
# -----------------------------
CORE_DIR = os.path.dirname(os.path.abspath(__file__))
WEB_DIR = os.path.abspath(os.path.join(CORE_DIR, ".."))  # app/web

TEMPLATES_DIR = os.getenv("TEMPLATES_DIR", os.path.join(WEB_DIR, "templates"))
STATIC_DIR = os.getenv("STATIC_DIR", os.path.join(WEB_DIR, "static"))

# -----------------------------
# Singletons
# -----------------------------
templates = Jinja2Templates(directory=TEMPLATES_DIR)
llm = make_llm_client()

ControllerFactory = Callable[[], QuizController]


def default_controller_factory() -> QuizController:
    return QuizController(llm, advance_delay=ADVANCE_DELAY_MS / 1000.0)


# sid -> controller, in memory only, least recently used first
controllers: OrderedDict[str, QuizController] = OrderedDict()


# -----------------------------
# Session helpers
# -----------------------------
def sid(request: Request) -> str:
    s = request.session.get("sid")
    if not s:
        s = secrets.token_urlsafe(16)
        request.session["sid"] = s
    return s


def get_controller(request: Request) -> QuizController:
    """
    Controller for this browser session. The first visit creates it and
    starts a generation cycle in the background; past MAX_CONTROLLERS the
    least recently used controller is dropped.
    """
    key = sid(request)
    ctrl = controllers.get(key)
    if ctrl is not None:
        controllers.move_to_end(key)
        return ctrl

    factory: ControllerFactory = getattr(
        request.app.state, "controller_factory", default_controller_factory
    )
    ctrl = factory()
    controllers[key] = ctrl
    while len(controllers) > MAX_CONTROLLERS:
        oldest = next(iter(controllers))
        drop_controller(oldest)
        log.info("Evicted idle quiz controller sid=%s", oldest[:6])

    ctrl.start()
    log.debug("New quiz controller for sid=%s (active=%d)", key[:6], len(controllers))
    return ctrl


def drop_controller(key: str) -> Optional[QuizController]:
    ctrl = controllers.pop(key, None)
    if ctrl is not None:
        ctrl.close()
    return ctrl


def drop_all_controllers() -> None:
    for key in list(controllers):
        drop_controller(key)
