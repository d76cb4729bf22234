import pytest

from src.core.errors import NotFound, PermissionDenied, Unauthenticated
from src.core.use_cases.get_pending_verifications import GetPendingVerificationsUseCase
from src.core.use_cases.get_verification_status import GetVerificationStatusUseCase
from src.core.use_cases.submit_documents import SubmissionInput, SubmitDocumentsUseCase
from src.core.use_cases.update_verification_status import (
    DecisionInput,
    UpdateVerificationStatusUseCase,
)
from tests.utils import add_document, add_user


@pytest.fixture()
def submit(uow_factory, clock):
    return SubmitDocumentsUseCase(uow_factory, clock=clock)


@pytest.fixture()
def decide(uow_factory, clock):
    return UpdateVerificationStatusUseCase(uow_factory, clock=clock)


@pytest.fixture()
def status(uow_factory):
    return GetVerificationStatusUseCase(uow_factory, history_limit=3)


@pytest.fixture()
def pending(uow_factory):
    return GetPendingVerificationsUseCase(uow_factory)


# -- status ------------------------------------------------------------------


def test_status_defaults_to_not_started(status, users) -> None:
    result = status.execute(users["seeker"])

    assert result.verification.status == "not_started"
    assert result.verification.is_verified is False
    assert result.verification.has_documents is False
    assert result.verification.submitted_at is None
    assert result.history == []


def test_status_requires_caller(status) -> None:
    with pytest.raises(Unauthenticated):
        status.execute(None)


def test_status_unknown_user(status) -> None:
    with pytest.raises(NotFound):
        status.execute("ghost")


def test_status_for_unresolvable_kind_is_not_started(status, database) -> None:
    add_user(database, "u-odd", user_type="guest")
    assert status.execute("u-odd").verification.status == "not_started"


def test_status_after_rejection(status, submit, decide, database, users) -> None:
    add_document(database, "doc-1")
    submit.execute(users["provider"], SubmissionInput("dni", "doc-1", notes="first"))
    decide.execute(users["admin"], DecisionInput(users["provider"], "rejected", rejection_reason="blurry"))

    result = status.execute(users["provider"])

    assert result.verification.status == "rejected"
    assert result.verification.rejection_reason == "blurry"
    assert result.verification.document_type == "dni"
    assert result.verification.has_documents is True
    assert [h.state for h in result.history] == ["rejected"]
    assert result.history[0].updated_at is not None


def test_status_history_newest_first_and_limited(status, submit, database, users) -> None:
    add_document(database, "doc-1")
    for _ in range(5):
        submit.execute(users["provider"], SubmissionInput("dni", "doc-1"))

    history = status.execute(users["provider"]).history

    assert len(history) == 3
    assert history[0].state == "pending"
    assert history[0].updated_at is None
    assert [h.state for h in history[1:]] == ["superseded", "superseded"]
    assert history[0].requested_at > history[1].requested_at > history[2].requested_at


def test_status_is_read_only(status, submit, database, users) -> None:
    add_document(database, "doc-1")
    submit.execute(users["provider"], SubmissionInput("dni", "doc-1"))

    assert status.execute(users["provider"]) == status.execute(users["provider"])


# -- pending queue -------------------------------------------------------------


def test_pending_requires_admin(pending, users) -> None:
    with pytest.raises(PermissionDenied):
        pending.execute(users["provider"])
    with pytest.raises(Unauthenticated):
        pending.execute(None)


def test_pending_empty(pending, users) -> None:
    assert pending.execute(users["admin"]) == []


def test_pending_oldest_first_across_kinds(pending, submit, database, users) -> None:
    add_document(database, "doc-s")
    add_document(database, "doc-p-front", url="https://files.example.com/front.png")
    add_document(database, "doc-p-back")

    submit.execute(users["seeker"], SubmissionInput("passport", "doc-s"))
    submit.execute(users["provider"], SubmissionInput("dni", "doc-p-front", "doc-p-back", notes="both sides"))

    queue = pending.execute(users["admin"])

    assert [p.user_id for p in queue] == [users["seeker"], users["provider"]]
    seeker, provider = queue
    assert seeker.user_type == "seeker"
    assert seeker.full_name == "Luis Diaz"
    assert [d.type for d in seeker.documents] == ["front"]
    assert provider.email == "user-provider@example.com"
    assert provider.notes == "both sides"
    assert provider.document_type == "dni"
    assert [(d.type, d.url, d.name) for d in provider.documents] == [
        ("front", "https://files.example.com/front.png", "doc-p-front.jpg"),
        ("back", "https://files.example.com/doc-p-back.jpg", "doc-p-back.jpg"),
    ]


def test_pending_excludes_decided(pending, submit, decide, database, users) -> None:
    add_document(database, "doc-1")
    add_document(database, "doc-2")
    submit.execute(users["provider"], SubmissionInput("dni", "doc-1"))
    submit.execute(users["seeker"], SubmissionInput("dni", "doc-2"))

    decide.execute(users["admin"], DecisionInput(users["provider"], "approved"))

    assert [p.user_id for p in pending.execute(users["admin"])] == [users["seeker"]]

    decide.execute(users["admin"], DecisionInput(users["provider"], "pending"))

    assert {p.user_id for p in pending.execute(users["admin"])} == {users["provider"], users["seeker"]}


def test_pending_name_falls_back_to_user_row(pending, submit, database) -> None:
    add_user(database, "u-noname", user_type="seeker", first_name=None, last_name="Solo")
    add_user(database, "u-admin2", role="admin")
    add_document(database, "doc-1")
    submit.execute("u-noname", SubmissionInput("dni", "doc-1"))

    (item,) = pending.execute("u-admin2")

    assert item.full_name == "Solo"
