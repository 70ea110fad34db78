"""UI components for the Streamlit pedometer screen."""

import streamlit as st
from typing import Dict, List, Optional, Tuple

from .config import DetectorConfig, UIConfig
from .readouts import READOUT_LABELS


SYNTHETIC_SOURCE = "Synthetic walk"


class PedometerUI:
    """Handles rendering of UI components for the pedometer app."""

    def __init__(self, ui_config: UIConfig, detector_config: Optional[DetectorConfig] = None):
        """
        Initialize the UI component manager.

        Args:
            ui_config: UI configuration object
            detector_config: Detector configuration (threshold slider range)
        """
        self.config = ui_config
        self.detector_config = detector_config or DetectorConfig()

    def render_header(self):
        """Render app title."""
        st.title("🐧 Pedometer 🐾")

    def render_source_selector(self, recordings: List[str]) -> str:
        """
        Render motion source selection dropdown.

        Args:
            recordings: Names of available recordings

        Returns:
            SYNTHETIC_SOURCE or a recording name
        """
        return st.selectbox("Motion source", [SYNTHETIC_SOURCE] + list(recordings), index=0)

    def render_controls(self, running: bool) -> Tuple[bool, bool, bool]:
        """
        Render Start / Reset / Stop buttons and the running label.

        Args:
            running: Whether a session is currently measuring

        Returns:
            Tuple of (start_clicked, reset_clicked, stop_clicked)
        """
        col1, col2, col3, col4 = st.columns([1, 1, 1, 2])
        with col1:
            start = st.button("▶ Start")
        with col2:
            reset = st.button("↺ Reset")
        with col3:
            stop = st.button("⏹ Stop")
        with col4:
            st.markdown("**Measuring**" if running else "Stopped")
        return start, reset, stop

    def render_threshold_slider(self, key: str = 'threshold') -> float:
        """
        Render the crossing threshold slider.

        The value lives in st.session_state[key]; initialise it before the
        first render to choose the starting threshold.

        Args:
            key: Session state key backing the slider

        Returns:
            Selected threshold
        """
        cfg = self.detector_config
        return st.slider(
            "⚙️ Threshold",
            min_value=cfg.THRESHOLD_MIN,
            max_value=cfg.THRESHOLD_MAX,
            step=cfg.THRESHOLD_STEP,
            format="%.1f",
            key=key,
            help="Rise of m above its running average needed to count a step"
        )

    def create_readout_placeholders(self) -> Dict[str, st.delta_generator.DeltaGenerator]:
        """
        Create placeholders for the numeric readouts.

        Returns:
            Dictionary keyed like READOUT_LABELS
        """
        placeholders = {}
        col1, col2 = st.columns(2)
        with col1:
            placeholders['steps'] = st.empty()
        with col2:
            placeholders['elapsed'] = st.empty()

        st.markdown("---")
        axis_keys = [key for key in READOUT_LABELS if key not in placeholders]
        for col, key in zip(st.columns(len(axis_keys)), axis_keys):
            with col:
                placeholders[key] = st.empty()
        return placeholders

    def create_chart_placeholder(self) -> st.delta_generator.DeltaGenerator:
        """Create a placeholder for the magnitude chart."""
        st.markdown("📈 **Time series (m)**")
        return st.empty()

    def create_status_placeholder(self) -> st.delta_generator.DeltaGenerator:
        """
        Create a placeholder for status messages.

        Returns:
            Streamlit empty placeholder
        """
        return st.empty()
