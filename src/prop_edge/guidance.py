"""Short play/pass guidance strings derived from the numeric edge fields."""

from __future__ import annotations

from prop_edge.quotes import OVER, Side


def _fmt(value: float) -> str:
    return f"{value:g}"


def format_guidance(
    soft_point: float,
    consensus: float,
    side: Side | None,
    max_acceptable: float | None,
    min_acceptable: float | None,
) -> str:
    if side is None:
        return "No clear edge detected"

    current_edge = abs(consensus - soft_point)
    if side == OVER and max_acceptable is not None:
        buffer = max_acceptable - soft_point
        if buffer > 1:
            return (
                f"STRONG: Take OVER up to {_fmt(max_acceptable)}. "
                f"Current line has {current_edge:.1f}pt edge."
            )
        if buffer > 0:
            return f"ACCEPTABLE: Line can move to {_fmt(max_acceptable)} max. Edge shrinking."
        return (
            f"LINE MOVED: Current {_fmt(soft_point)} exceeds max {_fmt(max_acceptable)}. Pass."
        )
    if side != OVER and min_acceptable is not None:
        buffer = soft_point - min_acceptable
        if buffer > 1:
            return (
                f"STRONG: Take UNDER down to {_fmt(min_acceptable)}. "
                f"Current line has {current_edge:.1f}pt edge."
            )
        if buffer > 0:
            return f"ACCEPTABLE: Line can drop to {_fmt(min_acceptable)} min. Edge shrinking."
        return f"LINE MOVED: Current {_fmt(soft_point)} below min {_fmt(min_acceptable)}. Pass."

    return f"Edge: {current_edge:.1f} pts vs Sharp {_fmt(consensus)}"
