import pytest
from sqlalchemy import select

from src.core.entities.verification import VerificationState
from src.core.errors import InvalidArgument, NotFound, PermissionDenied
from src.core.interfaces.notification_service import NotificationEvent
from src.core.use_cases.submit_documents import SubmissionInput, SubmitDocumentsUseCase
from src.core.use_cases.update_verification_status import (
    DecisionInput,
    UpdateVerificationStatusUseCase,
)
from src.infrastructure.db.models import ProviderProfileRecord, VerificationHistoryRecord
from tests.utils import add_document, add_user


@pytest.fixture()
def submit(uow_factory, clock):
    return SubmitDocumentsUseCase(uow_factory, clock=clock)


@pytest.fixture()
def decide(uow_factory, dispatcher, clock) -> UpdateVerificationStatusUseCase:
    return UpdateVerificationStatusUseCase(uow_factory, notifier=dispatcher, clock=clock)


@pytest.fixture()
def pending_provider(database, users, submit) -> str:
    add_document(database, "doc-1")
    submit.execute(users["provider"], SubmissionInput("dni", "doc-1", notes="my id"))
    return users["provider"]


def _profile(database, user_id):
    with database.session_scope() as session:
        return session.execute(
            select(ProviderProfileRecord).where(ProviderProfileRecord.user_id == user_id)
        ).scalars().first()


def _history(database, user_id):
    with database.session_scope() as session:
        rows = session.execute(
            select(VerificationHistoryRecord)
            .where(VerificationHistoryRecord.user_id == user_id)
            .order_by(VerificationHistoryRecord.requested_at)
        ).scalars().all()
        return [(r.state, r.updated_at is None, r.notes) for r in rows]


def test_approve(decide, database, users, pending_provider, dispatcher) -> None:
    result = decide.execute(users["admin"], DecisionInput(pending_provider, "approved"))

    assert result.status == VerificationState.APPROVED
    assert result.message == "Verification approved successfully"
    profile = _profile(database, pending_provider)
    assert profile.verification_state == "approved"
    assert profile.identity_verified is True
    assert profile.verified_at is not None
    assert profile.verification_notes == "my id"
    assert _history(database, pending_provider) == [("approved", False, "my id")]
    assert [n.event for n in dispatcher.sent] == [NotificationEvent.APPROVED]


def test_reject_with_reason(decide, database, users, pending_provider, dispatcher) -> None:
    decide.execute(users["admin"], DecisionInput(pending_provider, "rejected", rejection_reason="blurry photo"))

    profile = _profile(database, pending_provider)
    assert profile.verification_state == "rejected"
    assert profile.identity_verified is False
    assert profile.rejection_reason == "blurry photo"
    assert _history(database, pending_provider) == [("rejected", False, "blurry photo")]
    assert dispatcher.sent[-1].event == NotificationEvent.REJECTED
    assert dispatcher.sent[-1].rejection_reason == "blurry photo"


def test_reject_after_approve(decide, database, users, pending_provider) -> None:
    decide.execute(users["admin"], DecisionInput(pending_provider, "approved"))
    decide.execute(users["admin"], DecisionInput(pending_provider, "rejected", rejection_reason="fake"))

    profile = _profile(database, pending_provider)
    assert profile.identity_verified is False
    assert profile.verification_state == "rejected"


def test_notes_overwrite_regardless_of_status(decide, database, users, pending_provider) -> None:
    decide.execute(users["admin"], DecisionInput(pending_provider, "approved", notes="looks good"))
    assert _profile(database, pending_provider).verification_notes == "looks good"


def test_reset_to_pending_opens_new_cycle(decide, database, users, pending_provider, dispatcher) -> None:
    decide.execute(users["admin"], DecisionInput(pending_provider, "approved"))
    verified_at = _profile(database, pending_provider).verified_at
    dispatcher.sent.clear()

    decide.execute(users["admin"], DecisionInput(pending_provider, "pending"))

    profile = _profile(database, pending_provider)
    assert profile.verification_state == "pending"
    assert profile.identity_verified is False
    assert profile.verified_at == verified_at
    assert [(state, is_open) for state, is_open, _ in _history(database, pending_provider)] == [
        ("approved", False),
        ("pending", True),
    ]
    assert dispatcher.sent == []


def test_concurrent_open_entries_resolved_to_one(decide, database, users, pending_provider) -> None:
    # Simulate the race: a second open entry committed by a parallel submission
    with database.session_scope() as session:
        latest = session.execute(select(VerificationHistoryRecord)).scalars().first()
        session.add(
            VerificationHistoryRecord(
                user_id=pending_provider,
                state="pending",
                requested_at=latest.requested_at.replace(year=latest.requested_at.year - 1),
            )
        )

    decide.execute(users["admin"], DecisionInput(pending_provider, "approved"))

    states = sorted((state, is_open) for state, is_open, _ in _history(database, pending_provider))
    assert states == [("approved", False), ("superseded", False)]


def test_non_admin_denied_without_changes(decide, database, users, pending_provider, dispatcher) -> None:
    with pytest.raises(PermissionDenied):
        decide.execute(users["seeker"], DecisionInput(pending_provider, "approved"))

    assert _profile(database, pending_provider).verification_state == "pending"
    assert dispatcher.sent == []


def test_permission_checked_before_validation(decide, users) -> None:
    with pytest.raises(PermissionDenied):
        decide.execute(users["seeker"], DecisionInput(None, "bogus"))
    with pytest.raises(PermissionDenied):
        decide.execute("ghost-admin", DecisionInput("x", "approved"))


def test_invalid_status(decide, users, pending_provider) -> None:
    for status in ("bogus", "not_started", None):
        with pytest.raises(InvalidArgument) as exc_info:
            decide.execute(users["admin"], DecisionInput(pending_provider, status))
        assert "status" in exc_info.value.fields


def test_missing_user_id(decide, users) -> None:
    with pytest.raises(InvalidArgument):
        decide.execute(users["admin"], DecisionInput(None, "approved"))


def test_unknown_target_not_found(decide, users) -> None:
    with pytest.raises(NotFound):
        decide.execute(users["admin"], DecisionInput("ghost", "approved"))


def test_unresolvable_profile_kind_not_found(decide, database, users) -> None:
    add_user(database, "u-odd", user_type="guest")
    with pytest.raises(NotFound):
        decide.execute(users["admin"], DecisionInput("u-odd", "approved"))


def test_never_submitted_user_rejected(decide, database, users) -> None:
    add_user(database, "u-empty", user_type="provider", with_profile=True)

    for target in (users["provider"], "u-empty"):
        with pytest.raises(InvalidArgument):
            decide.execute(users["admin"], DecisionInput(target, "approved"))

    assert _profile(database, "u-empty").verification_state == "not_started"


def test_decision_without_open_entry_still_applies(decide, database, users, pending_provider) -> None:
    with database.session_scope() as session:
        session.query(VerificationHistoryRecord).delete()

    decide.execute(users["admin"], DecisionInput(pending_provider, "approved"))

    assert _profile(database, pending_provider).identity_verified is True
    assert _history(database, pending_provider) == []
