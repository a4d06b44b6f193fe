"""Tests for the song/album moderation state machine."""

import uuid

import pytest

from src.models.album import Album, AlbumStatus
from src.models.song import Song, SongStatus
from src.services.exceptions import StateError, ValidationError
from src.services.moderation import ModerationStateMachine


def make_song(status: SongStatus) -> Song:
    return Song(id=uuid.uuid4(), artist_user_id=uuid.uuid4(), title="Track", status=status.value)


def make_album(status: AlbumStatus) -> Album:
    return Album(id=uuid.uuid4(), artist_user_id=uuid.uuid4(), title="Record", status=status.value)


@pytest.mark.parametrize("status", [SongStatus.DRAFT, SongStatus.REJECTED])
def test_submit_moves_draft_or_rejected_song_to_pending(status):
    song = make_song(status)

    previous = ModerationStateMachine.submit_for_review(song)

    assert previous == status.value
    assert song.status == SongStatus.PENDING.value


@pytest.mark.parametrize(
    "status", [SongStatus.PENDING, SongStatus.APPROVED, SongStatus.TAKEN_DOWN]
)
def test_submit_rejects_songs_outside_draft(status):
    song = make_song(status)

    with pytest.raises(StateError) as exc_info:
        ModerationStateMachine.submit_for_review(song)

    assert exc_info.value.code == "NOT_SUBMITTABLE"
    assert song.status == status.value


def test_admin_can_approve_from_any_status():
    for status in SongStatus:
        song = make_song(status)
        ModerationStateMachine.admin_set_status(song, SongStatus.APPROVED.value)
        assert song.status == SongStatus.APPROVED.value
        assert song.published_at is not None


def test_reject_records_reason_and_approve_clears_it():
    song = make_song(SongStatus.PENDING)

    ModerationStateMachine.admin_set_status(song, SongStatus.REJECTED.value, "Low audio quality")
    assert song.reject_reason == "Low audio quality"
    assert song.published_at is None

    ModerationStateMachine.admin_set_status(song, SongStatus.APPROVED.value)
    assert song.reject_reason is None


def test_admin_override_can_reverse_an_approval():
    album = make_album(AlbumStatus.APPROVED)

    previous = ModerationStateMachine.admin_set_status(album, AlbumStatus.REJECTED.value, "Wrong artwork")

    assert previous == AlbumStatus.APPROVED.value
    assert album.status == AlbumStatus.REJECTED.value
    assert album.reject_reason == "Wrong artwork"


def test_admin_override_only_sets_terminal_statuses():
    song = make_song(SongStatus.APPROVED)

    with pytest.raises(ValidationError):
        ModerationStateMachine.admin_set_status(song, SongStatus.DRAFT.value)

    assert song.status == SongStatus.APPROVED.value


def test_take_down_applies_to_every_status():
    for status in SongStatus:
        song = make_song(status)
        assert ModerationStateMachine.take_down(song) == status.value
        assert song.status == SongStatus.TAKEN_DOWN.value


def test_can_transition_follows_workflow_table():
    assert ModerationStateMachine.can_transition(make_song(SongStatus.PENDING), "APPROVED")
    assert not ModerationStateMachine.can_transition(make_song(SongStatus.DRAFT), "APPROVED")
    assert ModerationStateMachine.can_transition(make_album(AlbumStatus.DRAFT), "PENDING")
    assert not ModerationStateMachine.can_transition(make_album(AlbumStatus.APPROVED), "PENDING")
