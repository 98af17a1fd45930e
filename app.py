"""
SOLRIX — Building Energy & Water Dashboard (Streamlit)

Run with:
    streamlit run app.py
"""

import os, sys, time
import numpy as np
import streamlit as st
import plotly.graph_objects as go
from plotly.subplots import make_subplots

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from solrix.config import SimulationConfig
from solrix.control import OperatingMode
from solrix.simulation import SimulationController, compute_snapshot
from solrix.models import HOURS_PER_DAY


# ─────────────────────────────────────────────────────────────────────────────
# PAGE CONFIG
# ─────────────────────────────────────────────────────────────────────────────
st.set_page_config(
    page_title="SOLRIX",
    page_icon="❄️",
    layout="wide",
    initial_sidebar_state="expanded",
)

# ─────────────────────────────────────────────────────────────────────────────
# COLOUR PALETTE
# ─────────────────────────────────────────────────────────────────────────────
C = dict(
    load      = "#22d3ee",
    load_fill = "rgba(34,211,238,0.18)",
    solar     = "#fbbf24",
    solar_fill= "rgba(251,191,36,0.18)",
    manual    = "#c0392b",
    ice       = "#3498db",
    night_bg  = "rgba(150,160,200,0.07)",
)

TEMPLATE = "plotly_white"


# ─────────────────────────────────────────────────────────────────────────────
# SIDEBAR
# ─────────────────────────────────────────────────────────────────────────────
with st.sidebar:
    st.title("⚙️ Configuration")

    with st.expander("⏱️ Simulation", expanded=True):
        tick_period_ms = st.select_slider(
            "Tick Period", options=[500, 1000, 2000, 4000], value=2000,
            format_func=lambda x: f"{x} ms",
            help="Wall-clock time per simulated hour",
        )
        auto_advance = st.checkbox("Advance clock automatically", value=True)

    with st.expander("❄️ Cooling Plant", expanded=False):
        tint_threshold = st.slider("Tinting Threshold (°C)", 28.0, 40.0, 32.0, 0.5)
        ice_discharge  = st.slider("Peak Ice Discharge (kW)", 0.0, 30.0, 15.0, 1.0)

    with st.expander("☀️ Solar Park", expanded=False):
        solar_peak = st.slider("Peak Output (kW)", 10.0, 100.0, 50.0, 5.0)

    st.markdown("---")
    reset_btn = st.button("⟲  Reset Simulation", use_container_width=True)


# ─────────────────────────────────────────────────────────────────────────────
# CONTROLLER (one per session)
# ─────────────────────────────────────────────────────────────────────────────
cfg = SimulationConfig.from_dict({
    "tick_period_ms":         float(tick_period_ms),
    "cooling.tint_threshold": tint_threshold,
    "cooling.ice_discharge":  ice_discharge,
    "solar.peak_output":      solar_peak,
})

if reset_btn or "controller" not in st.session_state:
    st.session_state["controller"] = SimulationController(cfg)
else:
    ctrl = st.session_state["controller"]
    if ctrl.config != cfg:
        ctrl.reconfigure(cfg)

controller: SimulationController = st.session_state["controller"]


# ─────────────────────────────────────────────────────────────────────────────
# HEADER + MODE TOGGLE
# ─────────────────────────────────────────────────────────────────────────────
head_l, head_r = st.columns([3, 1])
with head_l:
    st.title("PROJECT SOLRIX")
with head_r:
    ai_on = st.toggle("AI optimized", value=controller.mode.is_optimized)
    wanted = OperatingMode.AI_OPTIMIZED if ai_on else OperatingMode.MANUAL
    if wanted is not controller.mode:
        controller.set_mode(wanted)
    st.markdown(f"**{controller.mode.label}**")


# ─────────────────────────────────────────────────────────────────────────────
# LIVE PANEL
# ─────────────────────────────────────────────────────────────────────────────
def history_figure(ctrl: SimulationController) -> go.Figure:
    cols = ctrl.history.to_arrays()
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=cols["time"], y=cols["load"], name="Grid Load",
        fill="tozeroy", fillcolor=C["load_fill"],
        line=dict(color=C["load"], width=2, shape="spline"),
        hovertemplate="Load: %{y:.1f} kW<extra></extra>",
    ))
    fig.add_trace(go.Scatter(
        x=cols["time"], y=cols["solar"], name="Solar Park",
        fill="tozeroy", fillcolor=C["solar_fill"],
        line=dict(color=C["solar"], width=2, shape="spline"),
        hovertemplate="Solar: %{y:.1f} kW<extra></extra>",
    ))
    fig.update_yaxes(title_text="Power (kW)")
    fig.update_layout(
        template=TEMPLATE, height=360,
        title=f"Last {ctrl.history.capacity} Hours",
        hovermode="x unified",
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
    )
    return fig


def render_live(ctrl: SimulationController):
    s = ctrl.snapshot

    m1, m2, m3, m4, m5 = st.columns(5)
    m1.metric("Time", s.time_label)
    m2.metric("Outdoor Temp", f"{s.temperature_c:.0f} °C",
              delta="tinted glazing" if s.windows_tinted else None,
              delta_color="off")
    m3.metric("Cooling Load", f"{s.cooling_load_kw:.1f} kW")
    m4.metric("Solar Input", f"{s.solar_kw:.1f} kW")
    m5.metric("Irrigation Recovery", f"{s.water_recovered_lph:.1f} L/h")

    st.progress(int(s.ice_level_pct), text=f"THERMAL STORAGE (ICE): {s.ice_level_pct:.0f}%")

    if len(ctrl.history) > 0:
        st.plotly_chart(history_figure(ctrl), use_container_width=True)

    st.info(s.analysis_text)


if auto_advance:
    @st.fragment(run_every=tick_period_ms / 1000.0)
    def live_panel():
        # full-page reruns (mode toggle, sliders) must not advance the clock
        ctrl = st.session_state["controller"]
        now = time.monotonic()
        last = st.session_state.setdefault("last_tick", now)
        if now - last >= ctrl.config.tick_period_s * 0.95:
            ctrl.tick()
            st.session_state["last_tick"] = now
        render_live(ctrl)

    live_panel()
else:
    if st.button("▶  Next Hour", type="primary"):
        controller.tick()
    render_live(controller)


# ─────────────────────────────────────────────────────────────────────────────
# DAY COMPARISON: both modes over 24 hours
# ─────────────────────────────────────────────────────────────────────────────
st.markdown("---")
st.markdown("### 24-Hour Comparison")

hours = np.arange(HOURS_PER_DAY)
days = {
    mode: [compute_snapshot(int(h), mode, controller.models) for h in hours]
    for mode in OperatingMode
}

fig_day = make_subplots(rows=2, cols=1, shared_xaxes=True,
                        row_heights=[0.65, 0.35], vertical_spacing=0.05)
for mode, clr in [(OperatingMode.MANUAL, C["manual"]),
                  (OperatingMode.AI_OPTIMIZED, C["load"])]:
    fig_day.add_trace(go.Scatter(
        x=hours, y=[s.cooling_load_kw for s in days[mode]],
        name=f"Load — {mode.label}", line=dict(color=clr, width=2),
        hovertemplate=f"{mode.label}: %{{y:.1f}} kW<extra></extra>",
    ), row=1, col=1)
fig_day.add_trace(go.Scatter(
    x=hours, y=[s.solar_kw for s in days[OperatingMode.AI_OPTIMIZED]],
    name="Solar", line=dict(color=C["solar"], width=1.5, dash="dot"),
), row=1, col=1)
fig_day.add_trace(go.Bar(
    x=hours, y=[s.ice_level_pct for s in days[OperatingMode.AI_OPTIMIZED]],
    name="Ice Level", marker_color=C["ice"],
), row=2, col=1)

for h in hours:
    if not controller.models.environment.is_daylight(int(h)):
        fig_day.add_vrect(x0=h - 0.5, x1=h + 0.5, fillcolor=C["night_bg"], line_width=0)

fig_day.update_yaxes(title_text="Power (kW)", row=1, col=1)
fig_day.update_yaxes(title_text="Ice (%)", range=[0, 100], row=2, col=1)
fig_day.update_xaxes(title_text="Hour of Day", row=2, col=1)
fig_day.update_layout(template=TEMPLATE, height=520, hovermode="x unified")
st.plotly_chart(fig_day, use_container_width=True)

kwh_manual = sum(s.cooling_load_kw for s in days[OperatingMode.MANUAL])
kwh_ai     = sum(s.cooling_load_kw for s in days[OperatingMode.AI_OPTIMIZED])
water_ai   = sum(s.water_recovered_lph for s in days[OperatingMode.AI_OPTIMIZED])

d1, d2, d3 = st.columns(3)
d1.metric("Daily Cooling — Manual", f"{kwh_manual:.0f} kWh")
d2.metric("Daily Cooling — AI", f"{kwh_ai:.0f} kWh",
          delta=f"-{(1 - kwh_ai / kwh_manual) * 100:.0f}%" if kwh_manual > 0 else None,
          delta_color="inverse")
d3.metric("Daily Water Recovered — AI", f"{water_ai:.0f} L")
