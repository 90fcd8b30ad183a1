from abc import ABC, abstractmethod
from typing import AsyncIterator, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain.models import EngineEvent, RunState


class EngineConfig(BaseModel):
    """
    Session-scoped engine options. Shared by every run of a session.
    """
    model_config = ConfigDict(frozen=True)

    sub_tool: Optional[str] = None
    workspace: Optional[str] = None
    disable_cache: bool = False
    env: Dict[str, str] = Field(default_factory=dict)


class RunOptions(EngineConfig):
    """
    Options for a single run: the session config plus per-run fields.
    """
    input: str = ""
    chat_state: str = ""
    include_events: bool = False


class RunHandle(ABC):
    """
    A run started by the engine.

    events() ends when the engine closes the event phase. text() is only
    valid after that point.
    """

    @abstractmethod
    def events(self) -> AsyncIterator[EngineEvent]:
        pass

    @abstractmethod
    async def text(self) -> str:
        """Returns the run's final aggregated output. Raises on retrieval failure."""
        pass

    @abstractmethod
    def state(self) -> RunState:
        pass

    @abstractmethod
    def chat_state(self) -> str:
        pass

    @abstractmethod
    def error_output(self) -> str:
        pass


class ExecutionEngine(ABC):
    """
    Abstract Base Class interface that defines the contract for any engine
    able to run a scripted tool and stream its progress.
    """

    @abstractmethod
    async def start_run(self, tool_path: str, options: RunOptions) -> RunHandle:
        """
        Starts a run of the tool at 'tool_path'. Raises if the engine rejects it.
        """
        pass
