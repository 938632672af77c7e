from .scores import RunScores
from .runtime import RuntimeDeps
from .messages import Message, Role
from .settings import AppSettings
from .project import ChatRecord, ProjectConfig, ReferenceDocument

__all__ = [
    "AppSettings",
    "ChatRecord",
    "Message",
    "ProjectConfig",
    "ReferenceDocument",
    "Role",
    "RunScores",
    "RuntimeDeps",
]
