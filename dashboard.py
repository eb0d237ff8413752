"""
Fruit Freshness Dashboard
Interactive Streamlit Dashboard with Freshness Timeline and Storage Metrics
"""

import streamlit as st
import plotly.graph_objects as go
import plotly.express as px
from plotly.subplots import make_subplots
import pandas as pd
from dataclasses import replace

from advisory import (
    estimate_gas_composition,
    evaluate_gas_delta,
    evaluate_gas_raw,
    evaluate_humidity,
    evaluate_temperature,
)
from config import MonitorConfig
from data_models import FreshnessStage, FruitType
from fruit_profiles import get_display_name, get_emoji, get_profile
from monitoring import session_statistics
from sim_engine import run_monitoring

# Page configuration
st.set_page_config(
    page_title="Fruit Freshness Monitor",
    page_icon="🍌",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Custom CSS for better styling
st.markdown("""
<style>
    .main-header {
        font-size: 3rem;
        font-weight: bold;
        background: linear-gradient(90deg, #667eea 0%, #764ba2 100%);
        -webkit-background-clip: text;
        -webkit-text-fill-color: transparent;
        text-align: center;
        padding: 1rem 0;
    }
    .metric-card {
        background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
        padding: 1.5rem;
        border-radius: 10px;
        color: white;
        box-shadow: 0 4px 6px rgba(0,0,0,0.1);
    }
    .stage-card {
        padding: 1.5rem;
        border-radius: 10px;
        color: white;
        box-shadow: 0 4px 6px rgba(0,0,0,0.1);
    }
</style>
""", unsafe_allow_html=True)


def create_freshness_timeline(df, events):
    """Score and storage quality over time, with stage bands"""

    fig = go.Figure()

    bands = [
        (80, 100, FreshnessStage.VERY_FRESH),
        (60, 80, FreshnessStage.GOOD),
        (40, 60, FreshnessStage.EAT_TODAY),
        (0, 40, FreshnessStage.SPOILED),
    ]
    for lo, hi, stage in bands:
        fig.add_hrect(y0=lo, y1=hi, fillcolor=stage.color, opacity=0.07, line_width=0)

    fig.add_trace(go.Scatter(
        x=df['t_h'], y=df['score'],
        mode='lines+markers',
        name='Freshness score',
        line=dict(color='#667eea', width=3),
        marker=dict(size=5),
        hovertemplate='Time: %{x:.1f} h<br>Score: %{y:.1f}<extra></extra>'
    ))
    fig.add_trace(go.Scatter(
        x=df['t_h'], y=df['storage_quality'],
        mode='lines',
        name='Storage quality',
        line=dict(color='gray', width=2, dash='dash'),
        connectgaps=False,
        hovertemplate='Time: %{x:.1f} h<br>Storage: %{y}<extra></extra>'
    ))

    for ev in events:
        if ev.event == "FRUIT_SWITCH":
            fig.add_vline(x=ev.t_min / 60, line_dash="dot", line_color="purple",
                          annotation_text=ev.details.get('to', ''), annotation_position="top")

    fig.update_layout(
        title='Freshness Score Over Time',
        xaxis_title='Time (hours)',
        yaxis=dict(title='Score', range=[0, 105]),
        height=450,
        hovermode='x unified'
    )
    return fig


def create_environment_chart(df, fruit_type):
    """Temperature, humidity and gas delta against the optimal band"""

    p = get_profile(fruit_type)
    valid = df[df['valid']]

    fig = make_subplots(
        rows=3, cols=1, shared_xaxes=True,
        subplot_titles=['Temperature (°C)', 'Humidity (%)', 'Gas Δ (ADC)'],
        vertical_spacing=0.08
    )

    fig.add_trace(go.Scatter(x=valid['t_h'], y=valid['temperature_c'], mode='lines',
                             name='Temperature', line=dict(color='#f2994a', width=2)), row=1, col=1)
    fig.add_hrect(y0=p.min_temp, y1=p.max_temp, fillcolor='green', opacity=0.1, line_width=0, row=1, col=1)

    fig.add_trace(go.Scatter(x=valid['t_h'], y=valid['humidity_pct'], mode='lines',
                             name='Humidity', line=dict(color='#4facfe', width=2)), row=2, col=1)
    fig.add_hrect(y0=p.min_humidity, y1=p.max_humidity, fillcolor='green', opacity=0.1, line_width=0, row=2, col=1)

    fig.add_trace(go.Scatter(x=df['t_h'], y=df['gas_delta'], mode='lines',
                             name='Gas Δ', line=dict(color='#8d6e63', width=2)), row=3, col=1)
    fig.add_hline(y=p.gas_threshold, line_dash="dash", line_color="red",
                  annotation_text="Gas threshold", annotation_position="right", row=3, col=1)

    fig.update_xaxes(title_text="Time (hours)", row=3, col=1)
    fig.update_layout(height=650, showlegend=False, title_text="Storage Environment")
    return fig


def create_gas_composition_chart(report):
    """Estimated gas mix for the latest stage and gas delta"""

    delta = 0 if report.reading is None else report.reading.gas_delta
    composition = estimate_gas_composition(report.stage, delta)
    labels = {
        "nh3": "NH₃", "alcohol": "Alcohol", "co2": "CO₂",
        "nox": "NOx", "benzene": "Benzene", "smoke": "Smoke",
    }

    fig = go.Figure(go.Bar(
        x=[labels[k] for k in composition],
        y=list(composition.values()),
        marker_color=report.stage.color,
        hovertemplate="%{x}: %{y:.0f}<extra></extra>"
    ))
    fig.update_layout(
        title=f"Estimated Gas Composition ({report.stage.label})",
        yaxis=dict(title="Relative level", range=[0, 105]),
        height=350
    )
    return fig


def display_event_timeline(events):
    """Display stage changes and switches as a timeline"""

    shown = [ev for ev in events if ev.event in ("STAGE_CHANGE", "FRUIT_SWITCH", "EXPIRED")]
    skipped = sum(1 for ev in events if ev.event == "SENSOR_INVALID")

    if not shown:
        st.info("ℹ️ No stage changes during this session")
    else:
        df = pd.DataFrame([{
            'Time (h)': round(ev.t_min / 60, 1),
            'Event': ev.event,
            'Details': ", ".join(f"{k}={v}" for k, v in ev.details.items()),
        } for ev in shown])

        fig = px.scatter(df, x='Time (h)', y='Event', color='Event',
                         hover_data=['Details'], title='Session Events')
        fig.update_traces(marker=dict(size=14, line=dict(width=2, color='DarkSlateGrey')))
        fig.update_layout(height=250, showlegend=False)
        st.plotly_chart(fig, use_container_width=True)
        st.dataframe(df, use_container_width=True, hide_index=True)

    if skipped:
        st.caption(f"{skipped} invalid sensor readings were skipped (score held)")


def main():
    # Header
    st.markdown('<div class="main-header">🍏 Fruit Freshness Dashboard</div>', unsafe_allow_html=True)
    st.markdown("---")

    # Sidebar configuration
    with st.sidebar:
        st.markdown("### ⚙️ Session Configuration")

        fruit_type = st.selectbox(
            "Fruit",
            list(FruitType),
            format_func=lambda t: f"{get_emoji(t)} {get_display_name(t)}"
        )
        horizon_h = st.slider("Session length (hours)", 12, 240, 72, step=12)
        dt_min = st.select_slider("Cycle interval (min)", options=[10, 15, 30, 60], value=30)

        st.markdown("### 🌡️ Environment")
        ambient_temp = st.slider("Ambient temperature (°C)", 0.0, 35.0, 24.0, step=0.5)
        hold_optimal = st.checkbox("Hold optimal setpoint", value=True)
        setpoint = None
        if not hold_optimal:
            setpoint = st.slider("Storage setpoint (°C)", -2.0, 30.0, 20.0, step=0.5)

        seed = st.number_input("Random seed", 0, 9999, 7)

        st.markdown("---")
        run_button = st.button("🚀 Run Session", use_container_width=True)

    if run_button or 'session_run' not in st.session_state:
        with st.spinner("🔄 Running monitoring session..."):
            cfg = replace(
                MonitorConfig(),
                dt_min=dt_min,
                horizon_min=horizon_h * 60,
                ambient_temp_c=ambient_temp,
                setpoint_c=setpoint,
            )
            sim_res = run_monitoring(cfg, fruit_type=fruit_type, seed=int(seed))

            st.session_state['session_run'] = True
            st.session_state['sim_res'] = sim_res
            st.session_state['fruit_type'] = fruit_type
            st.session_state['cfg'] = cfg

    if 'session_run' in st.session_state:
        sim_res = st.session_state['sim_res']
        fruit_type = st.session_state['fruit_type']
        cfg = st.session_state['cfg']

        df = pd.DataFrame(sim_res.log_rows)
        df['t_h'] = df['t_min'] / 60.0
        final = sim_res.reports[-1]

        # Key Metrics Row
        st.markdown("### 📊 Current Status")
        col1, col2, col3, col4 = st.columns(4)

        with col1:
            st.markdown(f"""
            <div class="metric-card">
                <h3>{get_emoji(fruit_type)} Freshness</h3>
                <h1>{final.score:.0f}</h1>
                <p>out of 100</p>
            </div>
            """, unsafe_allow_html=True)

        with col2:
            st.markdown(f"""
            <div class="stage-card" style="background: {final.stage.color};">
                <h3>🏷️ Stage</h3>
                <h1>{final.stage.label}</h1>
                <p>{get_display_name(fruit_type)}</p>
            </div>
            """, unsafe_allow_html=True)

        with col3:
            days = "Expired" if final.remaining_days < 0 else f"{final.remaining_days} d"
            q10 = "" if final.shelf_life_days is None else f"Q10 estimate: {final.shelf_life_days:.1f} d"
            st.markdown(f"""
            <div class="metric-card">
                <h3>⏳ Remaining</h3>
                <h1>{days}</h1>
                <p>{q10}</p>
            </div>
            """, unsafe_allow_html=True)

        with col4:
            quality = df['storage_quality'].dropna()
            current = "--" if final.storage_quality is None else final.storage_quality
            st.markdown(f"""
            <div class="metric-card">
                <h3>🧊 Storage</h3>
                <h1>{current}</h1>
                <p>avg {quality.mean():.0f} / 100</p>
            </div>
            """, unsafe_allow_html=True)

        stats = session_statistics(sim_res.reports)
        col5, col6, col7 = st.columns(3)
        with col5:
            st.metric("Average score", f"{stats['avg_score']:.1f}")
        with col6:
            avg_days = stats['avg_remaining_days']
            st.metric("Average remaining days", "N/A" if avg_days is None else f"{avg_days:.1f}")
        with col7:
            st.metric("Total readings", stats['readings'])

        reading = final.reading
        if reading is not None and reading.valid:
            p = get_profile(fruit_type)
            st.caption(
                f"🌡️ {reading.temperature:.1f}°C: {evaluate_temperature(p, reading.temperature, cfg)}"
                f"  |  💧 {reading.humidity:.1f}%: {evaluate_humidity(p, reading.humidity, cfg)}"
                f"  |  💨 {reading.gas_raw}: {evaluate_gas_raw(reading.gas_raw)}"
                f"  |  Δ {reading.gas_delta:+d}: {evaluate_gas_delta(p, reading.gas_delta)}"
            )

        if final.tips:
            st.markdown("**💡 Tips:** " + " • ".join(final.tips))

        st.markdown("---")

        col_left, col_right = st.columns(2)

        with col_left:
            st.markdown("### 📈 Freshness")
            st.plotly_chart(create_freshness_timeline(df, sim_res.events), use_container_width=True)

            st.markdown("### 🔔 Events")
            display_event_timeline(sim_res.events)

        with col_right:
            st.markdown("### 🌡️ Environment")
            st.plotly_chart(create_environment_chart(df, fruit_type), use_container_width=True)

            st.markdown("### 💨 Gas")
            st.plotly_chart(create_gas_composition_chart(final), use_container_width=True)

        st.markdown("---")

        st.markdown("### 📋 Cycle Log")
        st.caption(f"Gas baseline: {sim_res.baseline} ADC")
        st.dataframe(df.drop(columns=['t_h']), use_container_width=True, hide_index=True)


if __name__ == "__main__":
    main()
