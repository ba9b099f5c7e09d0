"""
QuizGen AI - multiple-choice quizzes from documents and notes
Generates quizzes from PDF, DOCX, TXT, images or pasted text using Google's Gemini API
"""

import streamlit as st

from core.config import initialize_session_state
from ui.components import load_css, render_footer, render_header
from ui.export import render_export_section
from ui.quiz import render_quiz_section
from ui.results import render_results_section
from ui.sidebar import render_sidebar
from ui.upload import render_input_section

# Page Configuration - MUST be the first Streamlit command
st.set_page_config(
    page_title="QuizGen AI",
    page_icon="📝",
    layout="wide",
    initial_sidebar_state="expanded",
)


def main():
    """Main application entry point"""

    initialize_session_state()
    load_css()

    render_sidebar()
    render_header()

    if st.session_state.get('quiz') is None:
        render_input_section()
    elif st.session_state.get('quiz_result') is None:
        render_quiz_section()
    else:
        render_results_section()
        render_export_section()

    render_footer()


if __name__ == "__main__":
    main()
