"""Session limits (env-resolved constants only)."""

from __future__ import annotations

import os

# Sessions are cut off at this fraction of the realtime model's context window.
TOKEN_BUDGET_RATIO: float = 0.9

TOKENIZER_ENCODING: str = (os.getenv("TOKENIZER_ENCODING") or "").strip() or "cl100k_base"

# Grace wait between an implicit connect and the first typed message.
_TEXT_SEND_GRACE_S_RAW = (os.getenv("TEXT_SEND_GRACE_S") or "").strip()
try:
    TEXT_SEND_GRACE_S: float = float(_TEXT_SEND_GRACE_S_RAW) if _TEXT_SEND_GRACE_S_RAW else 0.1
except Exception:
    TEXT_SEND_GRACE_S = 0.1
if TEXT_SEND_GRACE_S < 0:
    TEXT_SEND_GRACE_S = 0.0

__all__ = [
    "TEXT_SEND_GRACE_S",
    "TOKENIZER_ENCODING",
    "TOKEN_BUDGET_RATIO",
]
