"""Readout display helpers for the pedometer UI."""

from typing import Any, Dict, Optional

from .session import UiSnapshot


READOUT_LABELS = {
    'steps': "👟 Steps",
    'elapsed': "⌛ Time",
    'x': "↔️ x",
    'y': "↕️ y",
    'z': "⤵️ z",
    'm': "📐 m",
}


def format_readout_value(value: Optional[float], decimals: int = 2, unit: str = "") -> str:
    """
    Format a numeric readout.

    Args:
        value: The value to format
        decimals: Digits after the decimal point
        unit: Optional unit suffix

    Returns:
        Formatted string, "--" when there is no value
    """
    if value is None:
        return "--"
    formatted = f"{value:.{decimals}f}"
    return f"{formatted} {unit}" if unit else formatted


def format_threshold(threshold: float) -> str:
    """One-decimal threshold label, as shown next to the slider."""
    return f"{threshold:.1f}"


def snapshot_readouts(snapshot: UiSnapshot, decimals: int = 2) -> Dict[str, str]:
    """
    Build the text of every readout for a snapshot.

    Args:
        snapshot: Snapshot published by the session
        decimals: Digits for the acceleration readouts

    Returns:
        Dictionary keyed like READOUT_LABELS
    """
    return {
        'steps': f"{snapshot.steps} [steps]",
        'elapsed': f"{snapshot.elapsed_sec} [s]",
        'x': format_readout_value(snapshot.x, decimals),
        'y': format_readout_value(snapshot.y, decimals),
        'z': format_readout_value(snapshot.z, decimals),
        'm': format_readout_value(snapshot.m, decimals),
    }


def display_readouts(placeholders: Dict[str, Any], snapshot: UiSnapshot, decimals: int = 2):
    """
    Display the snapshot readouts.

    Args:
        placeholders: Dictionary of Streamlit placeholder objects keyed like READOUT_LABELS
        snapshot: Snapshot published by the session
        decimals: Digits for the acceleration readouts
    """
    texts = snapshot_readouts(snapshot, decimals)
    for key, label in READOUT_LABELS.items():
        placeholders[key].metric(label, value=texts[key])


def display_empty_readouts(placeholders: Dict[str, Any]):
    """Display placeholders before the first session."""
    for key, label in READOUT_LABELS.items():
        placeholders[key].metric(label, value="--")
