import platform
import sys
import logging

from app.constants import APP_NAME

log = logging.getLogger("NewsQuiz")


def startup_banner(
    *,
    surface: str,
    provider: str,
    model: str,
    api: str,
    version: str,
    mode: str,
) -> None:
    rows = [
        ("CORE", f"{APP_NAME} v{version}"),
        ("ENV", mode),
        ("SURFACE", surface),
        ("RUNTIME", f"Python {sys.version.split()[0]}"),
        ("HOST", platform.system()),
        ("PROVIDER", provider),
        ("AI-ENGINE", model),
        ("LINK", api.replace("http://", "").replace("https://", "")),
    ]

    line = "─" * 44
    label_width = max(len(k) for k, _ in rows)

    log.info(line)
    log.info(" %s is online", APP_NAME)
    log.info("")
    for k, v in rows:
        log.info("%s : %s", k.ljust(label_width), v)
    log.info(line)
