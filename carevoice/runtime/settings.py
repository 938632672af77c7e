"""Load runtime settings.

Configuration values are resolved from the environment in `carevoice/config/*`
and exposed here as structured dataclasses for the rest of the package.
"""

from __future__ import annotations

from carevoice.config.api import APP_BASE_URL, HTTP_TIMEOUT_S
from carevoice.config.models import realtime_model_name, realtime_context_limit
from carevoice.config.limits import TEXT_SEND_GRACE_S, TOKENIZER_ENCODING, TOKEN_BUDGET_RATIO
from carevoice.state.settings import (
    ApiSettings,
    AppSettings,
    VoiceSettings,
    OpenAISettings,
    SarvamSettings,
    SessionSettings,
)
from carevoice.config.voice import (
    OPENAI_VOICE,
    SARVAM_APP_ID,
    SARVAM_ORG_ID,
    SARVAM_WS_URL,
    SARVAM_VERSION,
    VOICE_PROVIDER,
    OPENAI_REALTIME_URL,
    SARVAM_WORKSPACE_ID,
    OPENAI_SAMPLE_RATE_HZ,
    SARVAM_SAMPLE_RATE_HZ,
    SARVAM_USER_IDENTIFIER,
    VOICE_PROVIDER_CACHE_S,
    OPENAI_CONNECT_TIMEOUT_S,
    SARVAM_CONNECT_TIMEOUT_S,
    OPENAI_CLIENT_SECRETS_URL,
    OPENAI_TRANSCRIPTION_MODEL,
)


def load_settings() -> AppSettings:
    return AppSettings(
        api=ApiSettings(base_url=APP_BASE_URL, timeout_s=HTTP_TIMEOUT_S),
        voice=VoiceSettings(
            default_provider=VOICE_PROVIDER,
            provider_cache_s=VOICE_PROVIDER_CACHE_S,
            openai=OpenAISettings(
                realtime_url=OPENAI_REALTIME_URL,
                client_secrets_url=OPENAI_CLIENT_SECRETS_URL,
                model=realtime_model_name(),
                voice=OPENAI_VOICE,
                transcription_model=OPENAI_TRANSCRIPTION_MODEL,
                connect_timeout_s=OPENAI_CONNECT_TIMEOUT_S,
                sample_rate_hz=OPENAI_SAMPLE_RATE_HZ,
            ),
            sarvam=SarvamSettings(
                ws_url=SARVAM_WS_URL,
                org_id=SARVAM_ORG_ID,
                workspace_id=SARVAM_WORKSPACE_ID,
                app_id=SARVAM_APP_ID,
                version=SARVAM_VERSION,
                user_identifier=SARVAM_USER_IDENTIFIER,
                connect_timeout_s=SARVAM_CONNECT_TIMEOUT_S,
                sample_rate_hz=SARVAM_SAMPLE_RATE_HZ,
            ),
        ),
        session=SessionSettings(
            context_limit=realtime_context_limit(),
            token_budget_ratio=TOKEN_BUDGET_RATIO,
            tokenizer_encoding=TOKENIZER_ENCODING,
            text_send_grace_s=TEXT_SEND_GRACE_S,
        ),
    )


__all__ = ["load_settings"]
