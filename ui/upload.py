"""Input section UI: document upload or pasted text, and quiz generation."""

import dataclasses
import time
from typing import Optional

import streamlit as st

from core.config import load_settings
from core.errors import QuizGenError
from core.logging_utils import get_logger
from core.models import QuizRequestConfig
from core.validation import ACCEPTED_EXTENSIONS, MIN_TEXT_LENGTH
from extraction.content import extract_from_text, extract_from_upload
from extraction.prompts import compose_structured_text
from extraction.gemini import GeminiConfig
from extraction.pdf_utils import get_page_count
from processor import QuizGenerationSession, build_client


LOGGER = get_logger()


def _current_settings():
    return dataclasses.replace(
        load_settings(),
        api_key=st.session_state.api_key,
        model_name=st.session_state.model_name,
        temperature=float(st.session_state.temperature),
        max_output_tokens=int(st.session_state.max_tokens),
    )


def _request_config() -> QuizRequestConfig:
    return QuizRequestConfig(
        question_count=int(st.session_state.question_count),
        topic=(st.session_state.topic or '').strip() or None,
        quiz_type=st.session_state.quiz_type,
        difficulty=st.session_state.difficulty,
    )


def _pdf_page_count(uploaded_file) -> Optional[int]:
    if not uploaded_file.name.lower().endswith(".pdf"):
        return None
    try:
        return get_page_count(uploaded_file.getvalue())
    except Exception as e:
        LOGGER.info("Could not count pages of %s: %s", uploaded_file.name, e)
        return None


def render_input_section():
    """Render the upload and paste-text tabs."""

    st.header("📄 Create a Quiz")

    session = st.session_state.get('generation_session')
    busy = session is not None and session.busy
    settings = load_settings()

    if st.session_state.get('generation_error'):
        st.error(st.session_state.generation_error)

    upload_tab, text_tab = st.tabs(["Upload Document", "Paste Text"])

    with upload_tab:
        uploaded_file = st.file_uploader(
            "Choose a file",
            type=ACCEPTED_EXTENSIONS,
            help=(
                f"PDF, DOCX or TXT up to {settings.max_document_bytes // (1024 * 1024)}MB; "
                f"PNG, JPG, GIF or WEBP images up to {settings.max_image_bytes // (1024 * 1024)}MB."
            ),
            label_visibility="collapsed",
        )

        if uploaded_file:
            file_size = len(uploaded_file.getvalue()) / (1024 * 1024)
            col1, col2, col3 = st.columns([2, 1, 1])
            with col1:
                st.info(f"**File:** {uploaded_file.name}")
            with col2:
                st.info(f"**Size:** {file_size:.2f} MB")
            with col3:
                page_count = _pdf_page_count(uploaded_file)
                if page_count is not None:
                    st.info(f"**Pages:** {page_count}")
                else:
                    st.info(f"**Type:** {uploaded_file.name.rsplit('.', 1)[-1].upper()}")

            if st.button(
                "Generate Quiz",
                key="generate_from_file",
                use_container_width=True,
                type="primary",
                disabled=busy or not st.session_state.api_key_valid,
            ):
                process_upload(uploaded_file)

    with text_tab:
        st.session_state.topic = st.text_input(
            "Topic (optional)",
            value=st.session_state.topic,
            help="Naming a topic enables the quiz type and difficulty settings in the prompt",
        )
        text = st.text_area("Paste your content", height=250)
        length = len(text.strip())
        if length < MIN_TEXT_LENGTH:
            st.caption(f"{length} characters (minimum {MIN_TEXT_LENGTH} required)")
        else:
            st.caption(f"{length} characters (✓ ready)")

        if st.button(
            "Generate Quiz",
            key="generate_from_text",
            use_container_width=True,
            type="primary",
            disabled=busy or length < MIN_TEXT_LENGTH or not st.session_state.api_key_valid,
        ):
            process_text(text)

    if not st.session_state.api_key_valid:
        st.error("Please enter a valid API key in the sidebar")


def _run_generation(make_source, source_label: str):
    with st.spinner("Generating your quiz... This may take 10-60 seconds."):
        try:
            settings = _current_settings()
            config = _request_config()
            source = make_source(settings)

            session = st.session_state.get('generation_session')
            if session is None or session.client.cfg != GeminiConfig.from_settings(settings):
                session = QuizGenerationSession(build_client(settings))
                st.session_state.generation_session = session

            quiz = session.submit(source, config)
        except QuizGenError as e:
            LOGGER.warning("Quiz generation failed: %s", e)
            st.session_state.generation_error = e.user_message
            st.rerun()
        except Exception:
            LOGGER.exception("Unexpected error while generating quiz")
            st.session_state.generation_error = "Failed to generate quiz. Please try again."
            st.rerun()

    st.session_state.quiz = quiz
    st.session_state.quiz_result = None
    st.session_state.source_label = source_label
    st.session_state.generation_error = None
    st.session_state.quiz_started_at = time.time()
    st.rerun()


def process_upload(uploaded_file):
    """Extract and generate a quiz from an uploaded file."""
    data = uploaded_file.getvalue()

    def make_source(settings):
        return extract_from_upload(data, uploaded_file.name, uploaded_file.type, settings=settings)

    _run_generation(make_source, uploaded_file.name)


def process_text(text: str):
    """Generate a quiz from pasted text, embedding topic metadata if given."""
    topic = (st.session_state.topic or '').strip()

    def make_source(settings):
        source = extract_from_text(text)
        if topic:
            source = extract_from_text(compose_structured_text(
                topic,
                source.value,
                quiz_type=st.session_state.quiz_type,
                difficulty=st.session_state.difficulty,
            ))
        return source

    _run_generation(make_source, f"Pasted text ({len(text.strip())} chars)")
