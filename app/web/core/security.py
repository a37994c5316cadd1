from __future__ import annotations

from typing import Optional
from urllib.parse import urlparse


def same_origin(base_url: str, origin: Optional[str], referer: Optional[str]) -> bool:
    """
    True when the request's Origin (or, failing that, Referer) points at our
    own host. Requests carrying neither header are accepted.
    """
    base_host = urlparse(str(base_url).rstrip("/")).netloc

    if origin:
        return urlparse(origin).netloc == base_host
    if referer:
        return urlparse(referer).netloc == base_host
    return True
