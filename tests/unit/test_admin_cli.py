from candidate_management import CandidateArchive
from config.settings import settings
from interview_session import InterviewQuestion, SessionStore
from observability import admin_cli
from storage import PersistedState, StateFile
from validation import CandidateDetails


def _seed(tmp_path):
    archive = CandidateArchive()
    record = archive.add_record(
        details=CandidateDetails(name="Jane Doe", email="jane@example.com", phone="5551234567"),
        questions=[InterviewQuestion(text="What is JSX?", difficulty="easy", answer="Syntax sugar", score=6, justification="Brief.")],
        total_score=6,
        final_summary="Good grasp of React basics.",
    )
    store = SessionStore()
    store.set_status("active")
    store.add_message("ai", "Hello, Jane Doe!")
    store.add_message("user", "Hi")
    StateFile(tmp_path, settings.PERSIST_NAMESPACE).save(
        PersistedState(interview=store.state, candidates=archive.list_records())
    )
    return record


def test_list_and_show_candidates(tmp_path, capsys) -> None:
    record = _seed(tmp_path)
    state = admin_cli._load(str(tmp_path))

    admin_cli.list_candidates(state)
    admin_cli.show_candidate(state, record.id)
    admin_cli.show_candidate(state, "missing")
    out = capsys.readouterr().out

    assert f"{record.id} Jane Doe <jane@example.com> score=6" in out
    assert "Q1 [easy] What is JSX?" in out
    assert "summary: Good grasp of React basics." in out
    assert "No candidate with id missing" in out


def test_tail_transcript_prints_latest_messages(tmp_path, capsys) -> None:
    _seed(tmp_path)
    admin_cli.tail_transcript(admin_cli._load(str(tmp_path)), limit=1)
    out = capsys.readouterr().out
    assert "status=active" in out
    assert "user: Hi" in out
    assert "Hello, Jane Doe!" not in out


def test_missing_state_loads_empty(tmp_path) -> None:
    state = admin_cli._load(str(tmp_path / "nowhere"))
    assert state.candidates == []
    assert state.interview.status == "idle"
