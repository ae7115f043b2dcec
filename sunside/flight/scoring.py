from dataclasses import dataclass
from typing import Sequence

from sunside.util.format import format_utc
from .types import FlightPathPoint, FlightSummary, SideChoice, SunEvent

NO_EVENTS_DESCRIPTION = "No significant sunrise or sunset events detected during this flight."
SIDE_DOMINANCE_RATIO = 1.2


@dataclass(frozen=True)
class Recommendation:
    side: SideChoice
    confidence: float
    description: str


def recommend(
    events: Sequence[SunEvent],
    sun_visible_count: int,
    left_side_count: int,
    right_side_count: int,
) -> Recommendation:
    if events:
        return _recommend_from_events(events)
    if sun_visible_count > 0:
        return _recommend_from_exposure(sun_visible_count, left_side_count, right_side_count)
    return Recommendation(side="either", confidence=50.0, description=NO_EVENTS_DESCRIPTION)


def _recommend_from_events(events: Sequence[SunEvent]) -> Recommendation:
    left = sum(1 for e in events if e.viewing_side == "left")
    right = sum(1 for e in events if e.viewing_side == "right")
    if left > right:
        side: SideChoice = "left"
        confidence = float(min(95, 60 + left * 15))
        description = (
            f"Choose the LEFT side for the best view! "
            f"{left} sunrise/sunset event(s) visible on the left side."
        )
    elif right > left:
        side = "right"
        confidence = float(min(95, 60 + right * 15))
        description = (
            f"Choose the RIGHT side for the best view! "
            f"{right} sunrise/sunset event(s) visible on the right side."
        )
    else:
        side = "either"
        confidence = 75.0
        description = (
            "Either side works well! Sunrise/sunset events are visible "
            "from both sides of the aircraft."
        )
    details = ", ".join(_describe_event(e) for e in events)
    return Recommendation(side=side, confidence=confidence, description=f"{description} Events: {details}.")


def _describe_event(event: SunEvent) -> str:
    return f"{event.type} at {format_utc(event.time_utc, short=True)} UTC ({event.viewing_side} side)"


def _recommend_from_exposure(visible: int, left: int, right: int) -> Recommendation:
    if left > right * SIDE_DOMINANCE_RATIO:
        return Recommendation(
            side="left",
            confidence=min(80.0, 50.0 + left / visible * 30.0),
            description="Choose the LEFT side for better sun exposure during the flight.",
        )
    if right > left * SIDE_DOMINANCE_RATIO:
        return Recommendation(
            side="right",
            confidence=min(80.0, 50.0 + right / visible * 30.0),
            description="Choose the RIGHT side for better sun exposure during the flight.",
        )
    return Recommendation(
        side="either",
        confidence=50.0,
        description=NO_EVENTS_DESCRIPTION,
    )


def build_summary(
    events: Sequence[SunEvent],
    points: Sequence[FlightPathPoint],
    side: SideChoice,
) -> FlightSummary:
    visible = sum(1 for p in points if p.sun.visible)
    visibility = visible / len(points) * 100.0 if points else 0.0
    return FlightSummary(
        total_sunrise_events=sum(1 for e in events if e.type == "sunrise"),
        total_sunset_events=sum(1 for e in events if e.type == "sunset"),
        average_sun_visibility=visibility,
        best_viewing_side=side,
    )
