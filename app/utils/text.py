# app/utils/text.py
import re

_FENCE_RE = re.compile(r"```json\n?|```", re.IGNORECASE)
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def strip_json_fences(text: str) -> str:
    """
    Remove markdown fence delimiters (```json / ```) wherever they appear,
    keeping what was inside them.
    """
    return _FENCE_RE.sub("", text or "").strip()


def remove_control_chars(s: str) -> str:
    return _CONTROL_CHARS_RE.sub("", s or "")


def ellipsize(s: str, max_len: int) -> str:
    s = (s or "").strip()
    if max_len <= 0:
        return ""
    if len(s) <= max_len:
        return s
    if max_len <= 1:
        return "…"
    return s[: max_len - 1].rstrip() + "…"


def one_line(text: str) -> str:
    s = remove_control_chars(text or "")
    return " ".join(s.split())
