from meditrans.ai import SUMMARY_FAILED
from meditrans.models import Conversation
from meditrans.session import ConversationSession, build_transcript, filter_conversations
from tests.conftest import FakeSummarizer, FakeTranslator


def make_session(store, translator=None, summarizer=None):
    notes = []
    session = ConversationSession(
        store,
        translator or FakeTranslator(),
        summarizer or FakeSummarizer(),
        notify=notes.append,
    )
    session.notes = notes
    return session


def test_start_creates_conversation_when_empty(store):
    session = make_session(store)

    session.start()

    assert session.active is not None
    assert session.conversations == [session.active]
    assert store.list_conversations() == [session.active]
    assert session.messages == []


def test_start_selects_most_recent(store):
    older = store.create_conversation()
    newer = store.create_conversation()
    store.update_conversation_summary(newer.id, "existing summary")
    session = make_session(store)

    session.start()

    assert session.active.id == newer.id
    assert session.summary == "existing summary"
    assert len(store.list_conversations()) == 2
    assert older.id in [c.id for c in session.conversations]


def test_send_message_without_active_conversation_is_noop(store, translator):
    session = make_session(store, translator)

    assert session.send_message("Hello", "doctor") is None
    assert translator.calls == []


def test_doctor_message_translates_to_spanish(store, translator):
    session = make_session(store, translator)
    session.new_conversation()

    msg = session.send_message("Where does it hurt?", "doctor")

    assert translator.calls == [("Where does it hurt?", "es")]
    assert (msg.original_lang, msg.target_lang) == ("en", "es")
    assert msg.translated_text == "[es] Where does it hurt?"
    assert session.messages == [msg]
    assert store.list_messages(session.active.id) == [msg]


def test_patient_message_ignores_detected_language(store):
    translator = FakeTranslator({"translatedText": "My head hurts", "detectedLang": "pt"})
    session = make_session(store, translator)
    session.new_conversation()

    msg = session.send_message("Me duele la cabeza", "patient")

    assert translator.calls == [("Me duele la cabeza", "en")]
    assert (msg.original_lang, msg.target_lang) == ("es", "en")


def test_failed_translation_is_still_stored(store):
    translator = FakeTranslator({"translatedText": "Error: GROQ_API_KEY is not set", "detectedLang": "unknown"})
    session = make_session(store, translator)
    session.new_conversation()

    msg = session.send_message("Hello", "doctor")

    assert msg.translated_text == "Error: GROQ_API_KEY is not set"
    assert store.list_messages(session.active.id) == [msg]


def test_send_audio_uses_placeholder(store, translator):
    session = make_session(store, translator)
    session.new_conversation()

    msg = session.send_audio("patient", "data:audio/webm;base64,AAAA")

    assert msg.original_text == "[Audio Message]"
    assert msg.audio_data == "data:audio/webm;base64,AAAA"
    assert session.active.last_message == "[Audio Message]"


def test_repeated_recording_is_sent_once_per_role(store, translator):
    session = make_session(store, translator)
    session.new_conversation()
    clip = "data:audio/wav;base64,AAAA"

    assert session.send_audio("doctor", clip) is not None
    assert session.send_audio("doctor", clip) is None
    assert session.send_audio("patient", clip) is not None
    assert session.send_audio("doctor", "data:audio/wav;base64,BBBB") is not None
    # only the latest recording per role is remembered
    assert session.send_audio("doctor", clip) is not None

    assert len(store.list_messages(session.active.id)) == 4
    assert len(translator.calls) == 4


def test_send_refreshes_conversation_order(store):
    session = make_session(store)
    c1 = session.new_conversation()
    c2 = session.new_conversation()
    assert [c.id for c in session.conversations] == [c2.id, c1.id]

    session.select_conversation(c1)
    session.send_message("Back again", "doctor")

    assert [c.id for c in session.conversations] == [c1.id, c2.id]
    assert session.conversations[0].last_message == "Back again"


def test_select_conversation_loads_its_messages(store):
    session = make_session(store)
    first = session.new_conversation()
    session.send_message("first visit", "doctor")
    session.new_conversation()
    assert session.messages == []

    session.select_conversation(first)

    assert [m.original_text for m in session.messages] == ["first visit"]


def test_select_stale_reference_reloads_summary(store):
    session = make_session(store, summarizer=FakeSummarizer("## Plan"))
    c1 = session.new_conversation()
    session.send_message("Hello", "doctor")
    session.generate_summary()
    session.new_conversation()
    assert session.summary == ""

    session.select_conversation(c1)

    assert c1.summary is None
    assert session.summary == "## Plan"
    assert session.active.summary == "## Plan"
    assert session.active.last_message == "Hello"


def test_summary_without_messages_is_noop(store):
    summarizer = FakeSummarizer()
    session = make_session(store, summarizer=summarizer)
    session.new_conversation()

    assert session.generate_summary() is None
    assert summarizer.calls == []
    assert store.list_conversations()[0].summary is None
    assert session.notes == []


def test_summary_uses_transcript_and_persists(store):
    summarizer = FakeSummarizer("## Plan\nRest")
    session = make_session(store, summarizer=summarizer)
    session.new_conversation()
    session.send_message("Hello", "doctor")
    session.send_message("Hola doctor", "patient")

    assert session.generate_summary() == "## Plan\nRest"

    assert summarizer.calls == ["doctor: Hello\npatient: Hola doctor"]
    assert session.summary == "## Plan\nRest"
    assert store.list_conversations()[0].summary == "## Plan\nRest"
    assert session.conversations[0].summary == "## Plan\nRest"
    assert session.is_generating_summary is False


def test_regenerated_summary_overwrites(store):
    session = make_session(store, summarizer=FakeSummarizer("first", "second"))
    session.new_conversation()
    session.send_message("Hello", "doctor")

    session.generate_summary()
    session.generate_summary()

    assert store.list_conversations()[0].summary == "second"


def test_failed_summary_keeps_previous(store):
    summarizer = FakeSummarizer("good summary", SUMMARY_FAILED)
    session = make_session(store, summarizer=summarizer)
    session.new_conversation()
    session.send_message("Hello", "doctor")
    session.generate_summary()

    assert session.generate_summary() is None

    assert session.notes == ["Failed to generate summary"]
    assert session.summary == "good summary"
    assert store.list_conversations()[0].summary == "good summary"


def test_empty_summary_counts_as_failure(store):
    session = make_session(store, summarizer=FakeSummarizer(""))
    session.new_conversation()
    session.send_message("Hello", "doctor")

    assert session.generate_summary() is None
    assert session.notes == ["Failed to generate summary"]
    assert store.list_conversations()[0].summary is None


def test_build_transcript_format(store):
    session = make_session(store)
    session.new_conversation()
    session.send_message("Hi", "doctor")
    session.send_audio("patient", "data:audio/webm;base64,AAAA")

    assert session.build_transcript() == "doctor: Hi\npatient: [Audio Message]"
    assert build_transcript([]) == ""


def conv(id, summary=None, last_message=None):
    return Conversation(id=id, created_at=0, summary=summary, last_message=last_message)


def test_filter_matches_summary_case_insensitively():
    convs = [
        conv("a1", summary="Patient reports MIGRAINE"),
        conv("b2", summary="Sprained ankle"),
        conv("c3", last_message="nothing here"),
    ]

    assert [c.id for c in filter_conversations(convs, "migraine")] == ["a1"]


def test_filter_matches_last_message_and_id():
    convs = [
        conv("abc-123", last_message="Tengo FIEBRE"),
        conv("ABC-456"),
    ]

    assert [c.id for c in filter_conversations(convs, "fiebre")] == ["abc-123"]
    # id matching is case-sensitive
    assert [c.id for c in filter_conversations(convs, "ABC")] == ["ABC-456"]


def test_empty_query_returns_everything(store):
    session = make_session(store)
    session.new_conversation()
    session.new_conversation()

    assert session.search("") == session.conversations
