from __future__ import annotations

import asyncio

from fixtures import FakeCapability, quiz_payload, tf
from quiz_tutor.tutor import config as config_mod
from quiz_tutor.tutor import phrases
from quiz_tutor.tutor.session import TutorSession
from quiz_tutor.tutor.turns import TurnState


def test_new_session_greets_the_user(capability, clock):
    session = TutorSession(capability, clock=clock)

    (greeting,) = session.state.messages
    assert greeting.role == "model"
    assert greeting.text == phrases.WELCOME_MESSAGE
    assert greeting.timestamp == "٠٢:٠٧ م"
    assert session.turn_state is TurnState.IDLE


def test_greeting_can_be_skipped(capability):
    assert TutorSession(capability, greet=False).state.messages == ()


def test_from_config_applies_session_defaults(capability, clock, workspace):
    path = workspace.write(
        "tutor.toml",
        '[session]\nlocale = "en-US"\ndefault_question_count = 2\n'
        'question_type = "tf"\n',
    )
    cfg = config_mod.load_config(explicit_path=path)

    session = TutorSession.from_config(cfg, capability, clock=clock)

    assert session.state.settings.question_count == 2
    assert session.state.settings.question_type.value == "tf"
    assert session.state.messages[0].timestamp == "02:07 PM"


def test_generation_and_chat_share_one_store(clock):
    capability = FakeCapability(
        payloads=[quiz_payload(tf("S1", True), tf("S2", False))],
        replies=["sure"],
    )
    session = TutorSession(capability, clock=clock)
    observed = []
    session.subscribe(observed.append)

    session.update_settings(file_name="physics.pdf", question_type="tf")
    outcome = asyncio.run(session.start_generation_flow())
    result = asyncio.run(session.send_message("Explain question 2"))

    assert outcome.succeeded
    assert len(session.state.questions) == 2
    assert result.reply.text == "sure"
    _, context = capability.chat_calls[0]
    assert "physics.pdf" in context
    assert "عدد الأسئلة المنشأة حالياً: 2." in context
    assert [m.role for m in session.state.messages] == [
        "model",
        "model",
        "user",
        "model",
    ]
    assert observed[-1] is session.state


def test_mutation_passthroughs(capability):
    session = TutorSession(capability, greet=False)
    session.set_questions(())
    session.clear_questions()

    assert session.state.questions == ()
