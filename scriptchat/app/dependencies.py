"""
Dependency Injection Wiring (Composition Root).

Instantiates the singleton services (engine, session repository, chat
service) once per process and wires them together. Tests replace them via
app.dependency_overrides.
"""


from functools import lru_cache
from fastapi import Depends

from ..config import settings
from ..engine.interface import EngineConfig, ExecutionEngine
from ..engine.adapters.scripted import EchoEngine
from ..execution.session import SessionModel
from ..repositories.session import SessionRepository, InMemorySessionRepository
from ..services.chat import ChatService

# Execution Engine (Singleton)
@lru_cache()
def get_engine() -> ExecutionEngine:
    return EchoEngine()

@lru_cache()
def get_engine_config() -> EngineConfig:
    return EngineConfig(
        sub_tool=settings.ENGINE_SUB_TOOL,
        workspace=settings.ENGINE_WORKSPACE,
        disable_cache=settings.ENGINE_DISABLE_CACHE,
        env=settings.ENGINE_ENV,
    )

# Session Repository (Singleton)
# Note: In-memory storage must be a singleton so data persists across requests!
@lru_cache()
def get_session_repository(
    engine: ExecutionEngine = Depends(get_engine),
) -> SessionRepository:
    engine_config = get_engine_config()
    return InMemorySessionRepository(
        factory=lambda: SessionModel(
            engine=engine,
            tool_path=settings.TOOL_PATH,
            engine_config=engine_config,
        )
    )

# The Chat Service (Singleton Service)
@lru_cache()
def get_chat_service(
    session_repo: SessionRepository = Depends(get_session_repository),
) -> ChatService:
    return ChatService(session_repository=session_repo)
