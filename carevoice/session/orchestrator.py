"""Conversation orchestrator.

Owns one learner session: the ordered message list, the connection and
turn-taking flags, mute state, the error banner, token usage and the backing
chat record. Engine callbacks are bound to the engine generation that created
them, so late events from a torn-down engine never touch the session.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from collections.abc import Awaitable, Callable, Coroutine

from carevoice.errors import NotConnectedError, PersistenceError
from carevoice.state.project import ChatRecord, ProjectConfig
from carevoice.state.messages import Message, Role
from carevoice.state.settings import AppSettings
from carevoice.realtime.engine import VoiceEngine
from carevoice.realtime.factory import create_voice_engine
from carevoice.realtime.resolver import ProviderResolver
from carevoice.realtime.providers import VoiceProvider
from carevoice.realtime.callbacks import VoiceEngineCallbacks
from carevoice.realtime.credentials import CredentialsClient

from .phase import SessionPhase
from .budget import TokenBudgetMonitor
from .persistence import ChatStore
from .instructions import build_instructions

logger = logging.getLogger(__name__)

EngineFactory = Callable[[VoiceEngineCallbacks, str | None], Awaitable[VoiceEngine]]

SEND_FAILED_MESSAGE = "Failed to send message"
CONNECT_FAILED_MESSAGE = "Failed to connect to voice chat"


def _default_engine_factory(settings: AppSettings) -> EngineFactory:
    credentials = CredentialsClient(base_url=settings.api.base_url, timeout_s=settings.api.timeout_s)
    resolver = ProviderResolver(
        credentials,
        default=VoiceProvider.parse(settings.voice.default_provider) or VoiceProvider.OPENAI,
        cache_s=settings.voice.provider_cache_s,
    )

    async def factory(callbacks: VoiceEngineCallbacks, model_id: str | None) -> VoiceEngine:
        return await create_voice_engine(
            callbacks,
            model_id,
            settings=settings.voice,
            credentials=credentials,
            resolver=resolver,
        )

    return factory


class ConversationOrchestrator:
    def __init__(
        self,
        project: ProjectConfig,
        *,
        settings: AppSettings,
        engine_factory: EngineFactory | None = None,
        chat_store: ChatStore | None = None,
        budget: TokenBudgetMonitor | None = None,
        chat: ChatRecord | None = None,
    ) -> None:
        self._project = project
        self._settings = settings
        self._engine_factory = engine_factory or _default_engine_factory(settings)
        self._owns_store = chat_store is None
        self._store = chat_store or ChatStore(base_url=settings.api.base_url, timeout_s=settings.api.timeout_s)
        self._budget = budget or TokenBudgetMonitor(
            context_limit=settings.session.context_limit,
            ratio=settings.session.token_budget_ratio,
            encoding=settings.session.tokenizer_encoding,
        )
        self._grace_s = settings.session.text_send_grace_s
        self.instructions = build_instructions(project)

        self.messages: list[Message] = []
        self.connecting = False
        self.connected = False
        self.listening = False
        self.speaking = False
        self.mic_muted = False
        self.speaker_muted = False
        self.error: str | None = None
        self.chat_id: str | None = None
        self.streaming_message_id: str | None = None

        self._engine: VoiceEngine | None = None
        self._generation = 0
        self._ever_connected = False
        self._should_create_chat = False
        self._persist_lock = asyncio.Lock()
        self._tasks: set[asyncio.Task] = set()

        if chat is not None:
            self.load_chat(chat)
        else:
            self._recompute_tokens()

    # ------------------------------------------------------------ read-only

    @property
    def engine(self) -> VoiceEngine | None:
        return self._engine

    @property
    def limit_reached(self) -> bool:
        return self._budget.limit_reached

    @property
    def token_count(self) -> int:
        return self._budget.token_count

    @property
    def usage_percentage(self) -> float:
        return self._budget.usage_percentage

    @property
    def text_input_enabled(self) -> bool:
        return not self.connecting and not self.limit_reached

    @property
    def phase(self) -> SessionPhase:
        if self.limit_reached:
            return SessionPhase.LIMIT_REACHED
        if self.connecting:
            return SessionPhase.CONNECTING
        if self.connected:
            if self.listening:
                return SessionPhase.LISTENING
            if self.speaking:
                return SessionPhase.SPEAKING
            return SessionPhase.IDLE_CONNECTED
        if self._ever_connected:
            return SessionPhase.DISCONNECTED
        return SessionPhase.IDLE

    # ------------------------------------------------------------- actions

    async def connect(self, start_muted: bool = False) -> None:
        if self.limit_reached:
            logger.info("connect blocked: conversation reached its token limit")
            return
        if self._engine is not None:
            self._teardown_engine()

        self.error = None
        self.connecting = True
        if self.chat_id is None:
            self._should_create_chat = True

        self._generation += 1
        generation = self._generation
        engine: VoiceEngine | None = None
        try:
            engine = await self._engine_factory(self._bind_callbacks(generation), self._project.llm_model)
            if generation != self._generation:
                engine.disconnect()
                return
            self._engine = engine
            await engine.connect(self.instructions, start_muted=start_muted)
        except Exception as exc:
            logger.warning("voice connect failed: %s", exc)
            if generation == self._generation:
                self.error = str(exc) or CONNECT_FAILED_MESSAGE
                self.connecting = False
                self._engine = None
            return

        if generation != self._generation:
            return
        if start_muted:
            self.mic_muted = True

    def disconnect(self) -> None:
        self._teardown_engine()
        self.connecting = False
        self.connected = False
        self.speaking = False
        self.listening = False
        self.mic_muted = False
        self.speaker_muted = False
        self.streaming_message_id = None
        self.error = None

    async def resume(self) -> None:
        """Reconnect muted when an existing chat is reopened."""
        if self.chat_id is None or self.connected or self.connecting or self.limit_reached:
            return
        await self.connect(start_muted=True)

    async def send_text(self, text: str) -> bool:
        message = (text or "").strip()
        if not message or self.limit_reached:
            return False
        try:
            if self._engine is None:
                await self.connect(start_muted=True)
                await asyncio.sleep(self._grace_s)
            engine = self._engine
            if engine is None:
                raise NotConnectedError(provider="session")
            await engine.send_text_message(message)
        except Exception as exc:
            logger.warning("sending text failed: %s", exc)
            self.error = SEND_FAILED_MESSAGE
            return False
        return True

    def toggle_mic_mute(self) -> bool:
        if self._engine is None:
            return self.mic_muted
        self.mic_muted = not self.mic_muted
        self._engine.mute(self.mic_muted)
        return self.mic_muted

    def toggle_speaker_mute(self) -> bool:
        if self._engine is None:
            return self.speaker_muted
        self.speaker_muted = not self.speaker_muted
        self._engine.mute_speaker(self.speaker_muted)
        return self.speaker_muted

    def dismiss_error(self) -> None:
        self.error = None

    def load_chat(self, chat: ChatRecord) -> None:
        self.chat_id = chat.id
        self._should_create_chat = False
        self.messages = list(chat.messages)
        self._recompute_tokens()

    async def wait_idle(self) -> None:
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        self.disconnect()
        await self.wait_idle()
        if self._owns_store:
            await self._store.aclose()

    # ------------------------------------------------------------ internals

    def _teardown_engine(self) -> None:
        engine, self._engine = self._engine, None
        # Bump first so the engine's on_disconnected is ignored.
        self._generation += 1
        if engine is not None:
            engine.disconnect()

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _upsert(self, message_id: str, role: Role, content: str) -> None:
        for index, existing in enumerate(self.messages):
            if existing.id == message_id:
                self.messages[index] = existing.with_content(content)
                break
        else:
            self.messages.append(Message(role=role, content=content, id=message_id))
        self._recompute_tokens()

    def _recompute_tokens(self) -> None:
        if not self._budget.update(self.instructions, self.messages):
            return
        logger.info("conversation reached its token limit; disconnecting")
        self.disconnect()

    async def _persist(self, user_text: str, assistant_text: str) -> None:
        async with self._persist_lock:
            try:
                if self.chat_id is None:
                    if not self._should_create_chat:
                        logger.debug("no chat to persist into; exchange kept in memory")
                        return
                    self.chat_id = await self._store.create_chat(self._project.id)
                    self._should_create_chat = False
                await self._store.save_message(self.chat_id, Role.USER, user_text)
                await self._store.save_message(self.chat_id, Role.ASSISTANT, assistant_text)
            except PersistenceError as exc:
                logger.warning("persisting exchange failed: %s", exc)
            except Exception:
                logger.exception("persisting exchange failed unexpectedly")

    # ------------------------------------------------------------ callbacks

    def _bind_callbacks(self, generation: int) -> VoiceEngineCallbacks:
        def live(fn: Callable[..., None]) -> Callable[..., None]:
            def wrapper(*args: Any) -> None:
                if generation != self._generation:
                    return
                fn(*args)

            return wrapper

        return VoiceEngineCallbacks(
            on_connected=live(self._on_connected),
            on_disconnected=live(self._on_disconnected),
            on_error=live(self._on_error),
            on_user_speech_start=live(self._on_user_speech_start),
            on_user_speech_end=live(self._on_user_speech_end),
            on_user_transcript=live(self._on_user_transcript),
            on_assistant_transcript_delta=live(self._on_assistant_delta),
            on_assistant_transcript_done=live(self._on_assistant_done),
            on_assistant_speaking_start=live(self._on_speaking_start),
            on_assistant_speaking_end=live(self._on_speaking_end),
            on_response_complete=live(self._on_response_complete),
        )

    def _on_connected(self) -> None:
        self.connecting = False
        self.connected = True
        self._ever_connected = True

    def _on_disconnected(self) -> None:
        self.connecting = False
        self.connected = False
        self.speaking = False
        self.listening = False
        self._engine = None

    def _on_error(self, message: str) -> None:
        self.error = message

    def _on_user_speech_start(self) -> None:
        self.listening = True
        self.speaking = False

    def _on_user_speech_end(self) -> None:
        self.listening = False

    def _on_user_transcript(self, message_id: str, text: str) -> None:
        self.listening = False
        self._upsert(message_id, Role.USER, text)

    def _on_assistant_delta(self, message_id: str, delta: str, full_text: str) -> None:
        self.speaking = True
        self.listening = False
        self.streaming_message_id = message_id
        self._upsert(message_id, Role.ASSISTANT, full_text)

    def _on_assistant_done(self, message_id: str) -> None:
        if self.streaming_message_id == message_id:
            self.streaming_message_id = None

    def _on_speaking_start(self) -> None:
        self.speaking = True
        self.listening = False

    def _on_speaking_end(self) -> None:
        self.speaking = False

    def _on_response_complete(self, user_text: str, assistant_text: str) -> None:
        self._spawn(self._persist(user_text, assistant_text))


__all__ = ["ConversationOrchestrator", "EngineFactory"]
