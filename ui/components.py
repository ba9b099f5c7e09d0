"""Common UI components and utilities."""

import streamlit as st


def render_header():
    """Render the application header."""
    st.title("QuizGen AI")
    st.markdown("""
    <div style='text-align: center; padding: 1rem 0; color: #666;'>
        Turn documents, images or pasted notes into multiple-choice quizzes with Google's Gemini AI
    </div>
    """, unsafe_allow_html=True)

    quiz = st.session_state.get('quiz')
    if quiz is not None:
        col1, col2, col3 = st.columns(3)

        with col1:
            st.metric("Questions", len(quiz))
        with col2:
            st.metric("Source", st.session_state.get('source_label') or "N/A")
        with col3:
            result = st.session_state.get('quiz_result')
            st.metric("Score", f"{result.percentage}%" if result else "-")

    st.divider()


def render_footer():
    """Render the application footer."""
    st.divider()
    st.markdown("""
    <div style='text-align: center; color: #999; padding: 2rem 0;'>
        <p>Made with Streamlit and Google Gemini AI</p>
    </div>
    """, unsafe_allow_html=True)


def reset_session():
    """Drop the current quiz and results so a new quiz can be generated."""
    session = st.session_state.get('generation_session')
    if session is not None and not session.busy:
        session.reset()
    for key in ('quiz', 'quiz_result', 'source_label', 'generation_error', 'quiz_started_at'):
        st.session_state[key] = None
    for key in [k for k in st.session_state.keys() if str(k).startswith('answer_')]:
        del st.session_state[key]


def load_css():
    """Load custom CSS styles."""
    st.markdown("""
    <style>
        .main {
            padding: 2rem;
        }

        h1 {
            color: #1f77b4;
            font-weight: 600;
        }

        .stButton button {
            border-radius: 6px;
            font-weight: 500;
        }

        .stFileUploader {
            border: 2px dashed #ccc;
            border-radius: 10px;
            padding: 2rem;
        }

        .stMetric {
            background-color: #f8f9fa;
            padding: 1rem;
            border-radius: 8px;
        }
    </style>
    """, unsafe_allow_html=True)
