"""Results section UI: score summary and per-question review."""

import streamlit as st

from core.scoring import format_duration, performance_message


def render_results_section():
    """Render score metrics and the question review."""

    quiz = st.session_state.get('quiz')
    result = st.session_state.get('quiz_result')
    if quiz is None or result is None:
        return

    st.header("📊 Results")
    st.subheader(performance_message(result.percentage))

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Score", f"{result.percentage}%")
    with col2:
        st.metric("Correct", f"{result.score}/{result.total}")
    with col3:
        st.metric("Incorrect", result.incorrect)
    with col4:
        st.metric("Time", format_duration(result.time_taken_s))

    st.markdown("---")
    st.subheader("Question Review")

    for q, outcome in zip(quiz, result.outcomes):
        icon = "✅" if outcome.is_correct else "❌"
        with st.expander(f"{icon} Q{outcome.index + 1}: {q.question}", expanded=not outcome.is_correct):
            for opt in q.options:
                if opt[:1].upper() == outcome.correct:
                    st.markdown(f"✅ **{opt}**")
                elif opt == outcome.selected:
                    st.markdown(f"❌ {opt}")
                else:
                    st.markdown(f"⭕ {opt}")
            if not outcome.selected:
                st.caption("Not answered")
