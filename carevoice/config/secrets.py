"""Secrets (read on demand so tests and admins can rotate them)."""

from __future__ import annotations

import os


def get_openai_api_key() -> str:
    return (os.getenv("OPENAI_API_KEY") or "").strip()


def get_sarvam_api_key() -> str:
    return (os.getenv("SARVAM_API_KEY") or "").strip()


__all__ = ["get_openai_api_key", "get_sarvam_api_key"]
