"""Session state and the pure reducer that advances it."""

from dataclasses import dataclass, replace

from weathersearch.models.forecast import ForecastResult
from weathersearch.models.location import Coordinates, Suggestion


@dataclass(frozen=True)
class SessionState:
    query: str = ""
    suggestions: tuple[Suggestion, ...] = ()
    coordinates: Coordinates | None = None
    location_label: str = ""
    forecast: ForecastResult | None = None
    error: str = ""
    loading: bool = False
    fetch_generation: int = 0

    @property
    def can_refresh(self) -> bool:
        return self.coordinates is not None and not self.loading


# --- Events ---


@dataclass(frozen=True)
class QueryChanged:
    query: str


@dataclass(frozen=True)
class SuggestionsArrived:
    query: str
    suggestions: tuple[Suggestion, ...]


@dataclass(frozen=True)
class SuggestionsFailed:
    query: str
    message: str


@dataclass(frozen=True)
class LocationSelected:
    suggestion: Suggestion
    coordinates: Coordinates


@dataclass(frozen=True)
class SelectionRejected:
    message: str


@dataclass(frozen=True)
class FetchStarted:
    generation: int


@dataclass(frozen=True)
class FetchSucceeded:
    generation: int
    forecast: ForecastResult


@dataclass(frozen=True)
class FetchFailed:
    generation: int
    message: str


Event = (
    QueryChanged
    | SuggestionsArrived
    | SuggestionsFailed
    | LocationSelected
    | SelectionRejected
    | FetchStarted
    | FetchSucceeded
    | FetchFailed
)


def reduce(state: SessionState, event: Event) -> SessionState:
    """Apply one event. Never mutates `state`."""
    if isinstance(event, QueryChanged):
        return replace(state, query=event.query)

    elif isinstance(event, SuggestionsArrived):
        if event.query != state.query:
            return state
        if not event.suggestions:
            return replace(state, suggestions=())
        return replace(state, suggestions=event.suggestions, error="")

    elif isinstance(event, SuggestionsFailed):
        if event.query != state.query:
            return state
        return replace(state, suggestions=(), error=event.message)

    elif isinstance(event, LocationSelected):
        return replace(
            state,
            query=event.suggestion.selection_label,
            location_label=event.suggestion.selection_label,
            suggestions=(),
            coordinates=event.coordinates,
        )

    elif isinstance(event, SelectionRejected):
        return replace(state, error=event.message)

    elif isinstance(event, FetchStarted):
        if event.generation <= state.fetch_generation:
            return state
        return replace(state, loading=True, fetch_generation=event.generation)

    elif isinstance(event, FetchSucceeded):
        if event.generation != state.fetch_generation:
            return state
        return replace(state, forecast=event.forecast, error="", loading=False)

    elif isinstance(event, FetchFailed):
        if event.generation != state.fetch_generation:
            return state
        return replace(state, forecast=None, error=event.message, loading=False)

    raise TypeError(f"Unknown session event: {event!r}")
