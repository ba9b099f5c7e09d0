"""Export section UI for downloading results."""

from datetime import datetime

import streamlit as st

from core.report import report_csv, report_json, render_text_report


def render_export_section():
    """Render the export section with download options."""

    quiz = st.session_state.get('quiz')
    result = st.session_state.get('quiz_result')
    if quiz is None or result is None:
        return

    st.header("💾 Export Results")

    col1, col2 = st.columns(2)
    with col1:
        st.session_state.student_name = st.text_input("Your name", value=st.session_state.student_name)
    with col2:
        st.session_state.course = st.text_input("Course", value=st.session_state.course)

    name = st.session_state.student_name.strip() or None
    course = st.session_state.course.strip() or None
    ts = datetime.now().strftime('%Y%m%d_%H%M%S')

    col1, col2, col3 = st.columns(3)
    with col1:
        st.download_button(
            label="Download Report",
            data=render_text_report(quiz, result, student_name=name, course=course),
            file_name=f"quiz_report_{ts}.txt",
            mime="text/plain",
            use_container_width=True,
        )
    with col2:
        st.download_button(
            label="Download CSV",
            data=report_csv(quiz, result),
            file_name=f"quiz_results_{ts}.csv",
            mime="text/csv",
            use_container_width=True,
            type="secondary",
        )
    with col3:
        st.download_button(
            label="Download JSON",
            data=report_json(quiz, result, student_name=name, course=course),
            file_name=f"quiz_results_{ts}.json",
            mime="application/json",
            use_container_width=True,
            type="secondary",
        )
