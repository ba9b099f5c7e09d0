"""Streamlit sidebar component for configuration."""

import os
import streamlit as st

from core.config import validate_api_key
from core.errors import ConfigurationError
from core.models import DIFFICULTIES, MAX_QUESTIONS, MIN_QUESTIONS, QUIZ_TYPES
from ui.components import reset_session


def render_sidebar():
    """Render the sidebar with API key, model settings, and quiz options."""

    with st.sidebar:
        st.title("⚙️ Configuration")

        # API Key Section
        st.subheader("API Key")

        # Check for .env key
        env_key = os.getenv('GEMINI_API_KEY')
        if env_key:
            fingerprint = f"***{env_key[-6:]}" if len(env_key) >= 6 else "***"
            try:
                st.session_state.api_key = validate_api_key(env_key)
                st.session_state.api_key_valid = True
                st.success(f"Using key from .env: {fingerprint}")
            except ConfigurationError as e:
                st.session_state.api_key_valid = False
                st.error(e.user_message)
        else:
            api_key_input = st.text_input(
                "Gemini API Key",
                type="password",
                value=st.session_state.api_key,
                help="Enter your Gemini API key. Get one from https://aistudio.google.com/app/apikey",
                placeholder="AIzaSy..."
            )

            if api_key_input:
                try:
                    st.session_state.api_key = validate_api_key(api_key_input)
                    st.session_state.api_key_valid = True
                    st.success("API key format looks valid")
                except ConfigurationError as e:
                    st.error(e.user_message)
                    st.session_state.api_key_valid = False
            else:
                st.warning("API key required (add to .env or enter above)")
                st.session_state.api_key_valid = False

        st.markdown("---")

        # Model Configuration
        st.subheader("Model Settings")

        st.session_state.temperature = st.slider(
            "Temperature",
            min_value=0.0,
            max_value=1.0,
            value=float(st.session_state.temperature),
            step=0.1,
            help="Lower values = more focused/deterministic"
        )

        st.session_state.max_tokens = st.select_slider(
            "Max Output Tokens",
            options=[2048, 4096, 8192, 16384],
            value=st.session_state.max_tokens,
            help="Maximum number of tokens in the response"
        )

        st.markdown("---")

        # Quiz Settings
        st.subheader("Quiz Options")

        st.session_state.question_count = st.number_input(
            "Number of questions",
            min_value=MIN_QUESTIONS,
            max_value=MAX_QUESTIONS,
            value=int(st.session_state.question_count),
            step=1,
        )

        st.session_state.quiz_type = st.selectbox(
            "Quiz type",
            options=list(QUIZ_TYPES),
            index=list(QUIZ_TYPES).index(st.session_state.quiz_type),
            format_func=str.title,
        )

        st.session_state.difficulty = st.selectbox(
            "Difficulty",
            options=list(DIFFICULTIES),
            index=list(DIFFICULTIES).index(st.session_state.difficulty),
            format_func=str.title,
        )

        st.markdown("---")

        # Actions
        st.subheader("Actions")

        if st.button("🔄 New Quiz", use_container_width=True):
            reset_session()
            st.rerun()
