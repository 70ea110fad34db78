"""
Streamlit pedometer screen: counts steps from an accelerometer stream and
shows live readouts with a scrolling magnitude chart.
"""
import asyncio
import itertools
import logging
import streamlit as st

from pedometer import (
    DetectorConfig,
    SourceConfig,
    UIConfig,
    AccelDataLoader,
    MotionPermissionError,
    PedometerSession,
    ReplayMotionSource,
    SyntheticMotionSource,
    ChartRenderer,
    PedometerUI,
    SYNTHETIC_SOURCE,
    display_readouts,
    display_empty_readouts,
)


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(name)s %(levelname)s: %(message)s"
)
logger = logging.getLogger("pedometer.app")


# Initialize configurations and components
detector_config = DetectorConfig()
source_config = SourceConfig()
ui_config = UIConfig()

st.set_page_config(page_title=ui_config.PAGE_TITLE)
ui = PedometerUI(ui_config, detector_config)
data_loader = AccelDataLoader(source_config.DATA_DIR)
renderer = ChartRenderer(ui_config)
chart_keys = itertools.count()

# === Session State Initialization ===
for key, default in [('session', None), ('last_snapshot', None),
                     ('threshold', detector_config.DEFAULT_THRESHOLD)]:
    if key not in st.session_state:
        st.session_state[key] = default

session = st.session_state.session

# === UI Setup ===
ui.render_header()

selected_source = ui.render_source_selector(data_loader.get_available_recordings())
start_clicked, reset_clicked, stop_clicked = ui.render_controls(
    running=session is not None and session.running
)

threshold = ui.render_threshold_slider(key='threshold')
if session is not None:
    session.set_threshold(threshold)

status = ui.create_status_placeholder()
readouts = ui.create_readout_placeholders()
chart = ui.create_chart_placeholder()


def build_source(choice: str):
    """Create the motion source for the selected entry."""
    if choice == SYNTHETIC_SOURCE:
        return SyntheticMotionSource(source_config, speed=source_config.DEFAULT_SPEED)
    return ReplayMotionSource(choice, loader=data_loader, config=source_config,
                              speed=source_config.DEFAULT_SPEED)


def remember_snapshot(snapshot):
    st.session_state.last_snapshot = snapshot


def render(snapshot):
    """Draw readouts and chart for a snapshot."""
    display_readouts(readouts, snapshot, ui_config.READOUT_DECIMALS)
    chart.plotly_chart(renderer.create_magnitude_chart(snapshot.history),
                       use_container_width=True, config={'displayModeBar': False},
                       key=f"chart_{next(chart_keys)}")


# === Main Streaming Function ===
async def stream_steps(session: PedometerSession, resume: bool = False) -> None:
    """
    Run the session until the source runs dry or the script is rerun.

    Args:
        session: Session to drive
        resume: Re-attach a session that was running before the rerun
    """
    if resume:
        session.resume()
    else:
        try:
            started = await session.start()
        except MotionPermissionError as e:
            status.error(f"Motion access refused: {e}")
            return
        if not started:
            return

    status.info("Measuring... press Stop to end the session")

    last_drawn = None
    while session.source.is_active:
        snapshot = st.session_state.last_snapshot
        if snapshot is not None and snapshot is not last_drawn:
            render(snapshot)
            last_drawn = snapshot
        await asyncio.sleep(ui_config.POLL_INTERVAL)

    error = session.source.error
    session.stop()
    render(session.snapshot())
    if error is not None:
        logger.error("Motion stream failed: %s", error)
        status.error(f"Stream failed after {session.step_count} steps: {error}")
        return
    status.success(f"Stream completed: {session.step_count} steps")


# === Control Logic ===
if stop_clicked and session is not None:
    session.stop()

if reset_clicked and session is not None:
    session.reset()

if start_clicked and (session is None or not session.running):
    if session is not None:
        session.close()
    session = PedometerSession(
        build_source(selected_source),
        config=detector_config,
        on_snapshot=remember_snapshot,
        threshold=st.session_state.threshold,
    )
    st.session_state.session = session
    logger.info("Starting session from source: %s", selected_source)
    asyncio.run(stream_steps(session))
elif session is not None and session.running:
    asyncio.run(stream_steps(session, resume=True))

# Frozen or empty view when not streaming
if session is None:
    display_empty_readouts(readouts)
    chart.plotly_chart(renderer.create_magnitude_chart([]), use_container_width=True,
                       config={'displayModeBar': False}, key='empty_chart')
    status.info("Ready. Click 'Start' to begin counting steps.")
elif not session.running:
    render(session.snapshot())
    if stop_clicked:
        status.warning(f"Stopped at {session.step_count} steps")
