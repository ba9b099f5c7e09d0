"""Quiz player: one radio group per question inside a single form."""

import time

import streamlit as st

from core.scoring import grade_quiz


def render_quiz_section():
    quiz = st.session_state.quiz
    if quiz is None:
        return

    st.header("📝 Take the Quiz")
    if quiz.is_fallback:
        st.warning("These are placeholder questions. The AI response could not be parsed.")
    elif len(quiz) < st.session_state.question_count:
        st.info(f"The AI returned {len(quiz)} of {st.session_state.question_count} requested questions.")

    with st.form("quiz_form"):
        for i, q in enumerate(quiz):
            st.markdown(f"**Q{i + 1}. {q.question}**")
            st.radio(
                f"Answer for question {i + 1}",
                options=list(q.options),
                index=None,
                key=f"answer_{i}",
                label_visibility="collapsed",
            )
            st.markdown("")

        submitted = st.form_submit_button("Submit Quiz", type="primary", use_container_width=True)

    if submitted:
        answers = {
            i: st.session_state.get(f"answer_{i}")
            for i in range(len(quiz))
            if st.session_state.get(f"answer_{i}")
        }
        started = st.session_state.get('quiz_started_at') or time.time()
        st.session_state.quiz_result = grade_quiz(quiz, answers, time_taken_s=int(time.time() - started))
        st.rerun()
