"""Learner conversation sessions."""

from .phase import SessionPhase
from .budget import TokenBudgetMonitor
from .persistence import ChatStore
from .instructions import build_instructions
from .orchestrator import ConversationOrchestrator

__all__ = [
    "ChatStore",
    "ConversationOrchestrator",
    "SessionPhase",
    "TokenBudgetMonitor",
    "build_instructions",
]
