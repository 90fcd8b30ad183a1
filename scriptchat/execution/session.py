"""
Session Model - Run Lifecycle State Machine

The SessionModel owns a session's run history, the active run and the chat
state carried between runs. It is driven cooperatively by a single caller:

1. submit(input) starts a run and returns the first Step.
2. The caller awaits step.run() and gets an Envelope.
3. update(envelope) folds it into state and returns the next Step.
4. Repeat until the Step is NoFurtherAction (falsy).

Only the awaits inside submit() and the pump block; update() is synchronous.
Run errors (busy, start, stream, finalize) are recorded on the active run.
An engine contract violation raises EngineContractError instead; the
session keeps the message in contract_violation and accepts new input.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from ..domain.models import RunState
from ..engine.interface import EngineConfig, ExecutionEngine, RunOptions
from ..services.exceptions import EngineContractError, RunBusyError
from ..state.models import RunRecord, RunStatus
from .folding import fold_event
from .pump import EventPump
from .schemas.envelopes import (
    NO_FURTHER_ACTION,
    DeliverEnvelope,
    Envelope,
    ErrorKind,
    ProgressEvent,
    ResumeEventPump,
    RunConcluded,
    RunFailed,
    Step,
)

logger = logging.getLogger(__name__)

# Engine states that may legitimately end a run, and what they become locally.
_CONCLUDED_STATUS: Dict[RunState, RunStatus] = {
    RunState.CONTINUE: RunStatus.CONTINUABLE,
    RunState.FINISHED: RunStatus.FINISHED,
    RunState.ERROR: RunStatus.ERRORED,
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionModel:
    def __init__(
        self,
        engine: ExecutionEngine,
        tool_path: str,
        engine_config: Optional[EngineConfig] = None,
        chat_state: str = "",
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.engine = engine
        self.tool_path = tool_path
        self.engine_config = engine_config or EngineConfig()
        self.chat_state = chat_state
        self.history: List[RunRecord] = []
        self.active: Optional[RunRecord] = None
        self._pump: Optional[EventPump] = None
        self._clock = clock
        # Set when the engine broke its contract on the active run
        self.contract_violation: Optional[str] = None

    @property
    def status(self) -> Optional[RunStatus]:
        return self.active.status if self.active else None

    @property
    def busy(self) -> bool:
        if self.active is None or self.contract_violation:
            return False
        return not self.active.status.is_terminal

    # ==========================================================================
    # Submit
    # ==========================================================================

    async def submit(self, text: str) -> Step:
        """
        Starts a new run with 'text' as input.

        Returns ResumeEventPump for the new run, or a DeliverEnvelope holding
        RunFailed when the session is busy or the engine refused the run.
        A busy rejection leaves the session untouched.
        """
        if self.busy:
            logger.warning("Rejected submit: a run is already in progress")
            return DeliverEnvelope(RunFailed(error=RunBusyError(), kind=ErrorKind.BUSY))

        self._archive_active()
        self.contract_violation = None
        self.active = RunRecord(input=text, start=self._clock(), status=RunStatus.CREATING)
        self._pump = None

        options = RunOptions(
            **self.engine_config.model_dump(),
            input=text,
            chat_state=self.chat_state,
            include_events=True,
        )

        try:
            handle = await self.engine.start_run(self.tool_path, options)
        except Exception as e:
            logger.error(f"Engine failed to start run for {self.tool_path}: {e}")
            return DeliverEnvelope(RunFailed(error=e, kind=ErrorKind.START))

        logger.info(f"Started run for {self.tool_path}")
        self._pump = EventPump(handle)
        return ResumeEventPump(self._pump)

    def _archive_active(self):
        # Runs that never recorded a call are dropped, not archived
        if self.active is not None and self.active.calls:
            self.history.append(self.active)
            logger.debug(f"Archived run with {len(self.active.calls)} calls")
        elif self.active is not None:
            logger.debug("Discarded run with no calls")

    # ==========================================================================
    # Update
    # ==========================================================================

    def update(self, envelope: Envelope) -> Step:
        """
        Folds one envelope into the active run and returns the next step.
        """
        if self.active is None:
            logger.warning(f"Ignoring {type(envelope).__name__}: no active run")
            return NO_FURTHER_ACTION

        pump = envelope.pump
        if pump is not None and pump is not self._pump:
            logger.warning(f"Ignoring stale {type(envelope).__name__} from a previous run")
            return NO_FURTHER_ACTION

        if isinstance(envelope, RunFailed):
            self._record_error(str(envelope.error))
            return NO_FURTHER_ACTION

        if isinstance(envelope, ProgressEvent):
            if self.active.status.is_terminal:
                logger.info("Run already concluded; stopping event processing")
                return NO_FURTHER_ACTION
            if self.active.status == RunStatus.CREATING:
                self.active.status = RunStatus.RUNNING
            fold_event(self.active, envelope.event)
            return ResumeEventPump(envelope.pump)

        if isinstance(envelope, RunConcluded):
            self._conclude(envelope)
            return NO_FURTHER_ACTION

        raise TypeError(f"Unknown envelope type: {type(envelope).__name__}")

    def _record_error(self, message: str):
        run = self.active
        if run.status.is_terminal:
            logger.info(f"Run already concluded; ignoring error: {message}")
            self._mark_ended()
            return

        # First error wins
        if not run.error_text:
            run.error_text = message
        run.status = RunStatus.ERRORED
        self._mark_ended()
        logger.info(f"Run errored: {run.error_text}")

    def _conclude(self, envelope: RunConcluded):
        run = self.active
        if run.status.is_terminal:
            self._mark_ended()
            return

        engine_state = envelope.handle.state()
        status = _CONCLUDED_STATUS.get(engine_state)
        if status is None:
            # Status is left as is; detaching the pump makes later envelopes stale
            message = f"invalid state {engine_state!r}"
            logger.critical(f"Engine reported invalid terminal state {engine_state!r}")
            self.contract_violation = message
            self._pump = None
            self._mark_ended()
            raise EngineContractError(message)

        run.output = envelope.text
        run.status = status
        if status == RunStatus.ERRORED:
            run.error_text = envelope.handle.error_output()
        else:
            self.chat_state = envelope.handle.chat_state()

        self._mark_ended()
        logger.info(f"Run concluded with status {status.value}")

    def _mark_ended(self):
        if self.active.end is None:
            self.active.end = self._clock()


async def drive(
    session: SessionModel,
    text: str,
    on_update: Optional[Callable[[SessionModel], None]] = None,
) -> Optional[RunRecord]:
    """
    The reference caller loop: submits 'text' and folds envelopes until the
    session returns NoFurtherAction. 'on_update' is called after every fold,
    which is where a rendering layer would redraw.

    Returns the active run once the loop stops.
    """
    step = await session.submit(text)
    while step:
        envelope = await step.run()
        step = session.update(envelope)
        if on_update is not None:
            on_update(session)
    return session.active
