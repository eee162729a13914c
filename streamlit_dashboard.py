import streamlit as st
import pandas as pd
import plotly.express as px
from google.auth.exceptions import GoogleAuthError

from scorebot.config import NO_SCORES_MESSAGE, NO_TABLES_MESSAGE, TABLE_NOT_FOUND_MESSAGE
from scorebot.ingestion.sheets import DataSourceError, GoogleSheetsSource, TableNotFoundError
from scorebot.scoring.course import load_par_table, normalize_course_name
from scorebot.scoring.leaderboard import compute_leaderboard, leaderboard_to_frame, parse_score_table
from scorebot.scoring.render import format_par_diff

# --- Page Configuration ---
st.set_page_config(
    page_title="Golf Leaderboard",
    page_icon="🏌️",
    layout="wide",
    initial_sidebar_state="expanded"
)

# --- Design System ---
ACCENT_COLORS = {
    "primary": "#FF6B6B",       # Coral red - leader bar
    "info": "#3B82F6",          # Blue - everyone else
}


def apply_plotly_style(fig):
    """Transparent backgrounds and neutral grid, so the chart follows the Streamlit theme."""
    grid_color = "rgba(128, 128, 128, 0.4)"
    fig.update_layout(
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        xaxis=dict(gridcolor=grid_color, showgrid=False, zeroline=False),
        yaxis=dict(gridcolor=grid_color, showgrid=True, zeroline=False),
        showlegend=False,
        dragmode=False,  # Disable pan/zoom to prevent scroll hijacking on mobile
    )
    return fig


# --- Data Loading Functions ---
@st.cache_resource
def get_source():
    return GoogleSheetsSource.from_env()


@st.cache_resource
def get_par_table():
    return load_par_table()


@st.cache_data(ttl=300)
def load_table_names():
    """Tab titles in spreadsheet order."""
    return get_source().list_tables()


@st.cache_data(ttl=300)
def load_rows(table_name):
    """Raw rows of one tab, or None if the tab does not exist. Other read errors propagate."""
    try:
        return get_source().get_rows(table_name)
    except TableNotFoundError:
        return None


def build_leaderboard_frame(rows, table_name) -> pd.DataFrame:
    records = parse_score_table(rows)
    entries = compute_leaderboard(records, normalize_course_name(table_name), get_par_table())
    df = leaderboard_to_frame(entries)
    df['to_par'] = [format_par_diff(None if pd.isna(v) else int(v)) for v in df['par_diff']]
    return df


# --- Main App ---
def main():
    st.title("🏌️ Golf Leaderboard")

    try:
        table_names = load_table_names()
    except ValueError as e:
        st.error(f"Spreadsheet is not configured: {e}")
        return
    except (DataSourceError, GoogleAuthError) as e:
        st.error(f"Failed to load the spreadsheet: {e}")
        return

    if not table_names:
        st.error(NO_TABLES_MESSAGE)
        return

    # --- Sidebar ---
    with st.sidebar:
        st.header("📋 Game")
        table_name = st.selectbox(
            "Game",
            options=table_names,
            index=0,
            label_visibility="collapsed"
        )
        course_key = normalize_course_name(table_name)
        pars = get_par_table().lookup(course_key)
        st.caption(f"Course: {course_key}")
        if pars is None:
            st.caption("Par unknown for this course")
        else:
            st.caption(f"Par {sum(pars)} over {len(pars)} holes")
        if st.button("Refresh"):
            st.cache_data.clear()

    try:
        rows = load_rows(table_name)
    except (DataSourceError, GoogleAuthError) as e:
        st.error(f"Failed to load scores for {table_name}: {e}")
        return

    if rows is None:
        st.error(TABLE_NOT_FOUND_MESSAGE.format(name=table_name))
        return

    df = build_leaderboard_frame(rows, table_name) if rows else pd.DataFrame()
    if df.empty:
        st.info(NO_SCORES_MESSAGE.format(name=table_name))
        return

    st.dataframe(
        df[['rank', 'team', 'total', 'holes_played', 'to_par']],
        width='stretch',
        hide_index=True,
        column_config={
            "rank": st.column_config.NumberColumn("Rank", format="%d"),
            "team": st.column_config.TextColumn("Team"),
            "total": st.column_config.NumberColumn("Strokes", format="%d"),
            "holes_played": st.column_config.NumberColumn("Holes", format="%d"),
            "to_par": st.column_config.TextColumn("To Par"),
        }
    )

    colors = [ACCENT_COLORS["primary"] if r == 1 else ACCENT_COLORS["info"] for r in df['rank']]
    fig = px.bar(
        df,
        x='team',
        y='total',
        text='total',
        labels={'team': 'Team', 'total': 'Strokes'},
    )
    fig.update_traces(marker_color=colors)
    st.plotly_chart(apply_plotly_style(fig), width='stretch')


if __name__ == "__main__":
    main()
