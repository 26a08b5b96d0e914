"""
Client-side flow state: which steps of the record -> analyze -> choose
journey are complete, and which pages the user may visit.

``reduce()`` is a pure transition function over frozen ``FlowState``
values. ``FlowStore`` is the only place state touches session storage.

Steps: idle -> recorded -> analyzed -> solution_chosen
"""

from collections.abc import MutableMapping
from dataclasses import dataclass, replace
from enum import IntEnum, StrEnum

from src.core.exceptions import FlowTransitionError
from src.core.models import AudioRecording, BusinessAnalysis, SolutionId


class FlowStep(IntEnum):
    idle = 0
    recorded = 1
    analyzed = 2
    solution_chosen = 3


class Route(StrEnum):
    home = "home"
    processing = "processing"
    insights = "insights"
    whatsapp = "whatsapp"
    instagram = "instagram"
    website = "website"


ROUTE_REQUIREMENTS: dict[Route, FlowStep] = {
    Route.home: FlowStep.idle,
    Route.processing: FlowStep.recorded,
    Route.insights: FlowStep.analyzed,
    Route.whatsapp: FlowStep.solution_chosen,
    Route.instagram: FlowStep.solution_chosen,
    Route.website: FlowStep.solution_chosen,
}

PROGRESS_STEPS = ("Record", "Process", "Insights", "Setup")


@dataclass(frozen=True)
class FlowState:
    """Serializable snapshot of the user's progress."""

    recording: AudioRecording | None = None
    transcript: str = ""
    analysis: BusinessAnalysis | None = None
    selected_solution: SolutionId | None = None

    @property
    def has_recorded(self) -> bool:
        return self.recording is not None

    @property
    def is_processed(self) -> bool:
        return self.analysis is not None

    @property
    def step(self) -> FlowStep:
        if self.selected_solution is not None:
            return FlowStep.solution_chosen
        if self.analysis is not None:
            return FlowStep.analyzed
        if self.recording is not None:
            return FlowStep.recorded
        return FlowStep.idle


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RecordingCaptured:
    recording: AudioRecording


@dataclass(frozen=True)
class AnalysisSucceeded:
    transcript: str
    analysis: BusinessAnalysis


@dataclass(frozen=True)
class SolutionSelected:
    solution: SolutionId


@dataclass(frozen=True)
class Reset:
    pass


FlowAction = RecordingCaptured | AnalysisSucceeded | SolutionSelected | Reset


def _require(state: FlowState, action: FlowAction, *allowed: FlowStep) -> None:
    if state.step not in allowed:
        raise FlowTransitionError(type(action).__name__, state.step.name)


def reduce(state: FlowState, action: FlowAction) -> FlowState:
    """Apply one action and return the next state.

    Raises:
        FlowTransitionError: If the action is not valid at the current step.
    """
    match action:
        case Reset():
            return FlowState()
        case RecordingCaptured(recording=recording):
            # Re-recording before analysis replaces the previous take
            _require(state, action, FlowStep.idle, FlowStep.recorded)
            return FlowState(recording=recording)
        case AnalysisSucceeded(transcript=transcript, analysis=analysis):
            _require(state, action, FlowStep.recorded)
            return replace(state, transcript=transcript, analysis=analysis)
        case SolutionSelected(solution=solution):
            _require(state, action, FlowStep.analyzed, FlowStep.solution_chosen)
            return replace(state, selected_solution=SolutionId(solution))
    raise TypeError(f"Unknown flow action: {action!r}")


def furthest_route(state: FlowState) -> Route:
    """The most advanced page the current state allows."""
    step = state.step
    if step == FlowStep.solution_chosen:
        return Route(state.selected_solution.value)
    if step == FlowStep.analyzed:
        return Route.insights
    if step == FlowStep.recorded:
        return Route.processing
    return Route.home


def resolve_route(state: FlowState, requested: Route) -> Route:
    """Gate navigation: return ``requested`` if reachable, else redirect."""
    if state.step >= ROUTE_REQUIREMENTS[requested]:
        return requested
    return furthest_route(state)


def progress_index(route: Route) -> int:
    """1-based position of ``route`` in the Record/Process/Insights/Setup bar."""
    return int(ROUTE_REQUIREMENTS[route]) + 1


# ---------------------------------------------------------------------------
# Persistence boundary
# ---------------------------------------------------------------------------


class FlowStore:
    """Loads and saves ``FlowState`` in a session mapping under fixed keys."""

    RECORDED_AUDIO = "recorded_audio"
    AUDIO_MIME_TYPE = "audio_mime_type"
    RECORDING_DURATION = "recording_duration"
    IS_PROCESSED = "is_processed"
    TRANSCRIPT = "transcript"
    ANALYSIS_DATA = "analysis_data"
    SELECTED_SOLUTION = "selected_solution"

    KEYS = (
        RECORDED_AUDIO,
        AUDIO_MIME_TYPE,
        RECORDING_DURATION,
        IS_PROCESSED,
        TRANSCRIPT,
        ANALYSIS_DATA,
        SELECTED_SOLUTION,
    )

    def __init__(self, storage: MutableMapping) -> None:
        self._storage = storage

    def load(self) -> FlowState:
        """Rehydrate state; missing or partial entries degrade to earlier steps."""
        audio = self._storage.get(self.RECORDED_AUDIO)
        if not audio:
            return FlowState()
        recording = AudioRecording(
            data=audio,
            mime_type=self._storage.get(self.AUDIO_MIME_TYPE) or "audio/webm",
            duration=float(self._storage.get(self.RECORDING_DURATION) or 0.0),
        )

        analysis_data = self._storage.get(self.ANALYSIS_DATA)
        if not (self._storage.get(self.IS_PROCESSED) and analysis_data):
            return FlowState(recording=recording)
        analysis = BusinessAnalysis.model_validate(analysis_data)

        solution = self._storage.get(self.SELECTED_SOLUTION)
        return FlowState(
            recording=recording,
            transcript=self._storage.get(self.TRANSCRIPT) or "",
            analysis=analysis,
            selected_solution=SolutionId(solution) if solution else None,
        )

    def save(self, state: FlowState) -> None:
        self.clear()
        if state.recording is not None:
            self._storage[self.RECORDED_AUDIO] = state.recording.data
            self._storage[self.AUDIO_MIME_TYPE] = state.recording.mime_type
            self._storage[self.RECORDING_DURATION] = state.recording.duration
        if state.analysis is not None:
            self._storage[self.IS_PROCESSED] = True
            self._storage[self.TRANSCRIPT] = state.transcript
            self._storage[self.ANALYSIS_DATA] = state.analysis.model_dump(by_alias=True, mode="json")
        if state.selected_solution is not None:
            self._storage[self.SELECTED_SOLUTION] = state.selected_solution.value

    def clear(self) -> None:
        for key in self.KEYS:
            self._storage.pop(key, None)

    def dispatch(self, action: FlowAction) -> FlowState:
        """Reduce ``action`` against the stored state and persist the result."""
        state = reduce(self.load(), action)
        self.save(state)
        return state
