"""Business rules and validation logic for catalog content."""

import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional

from src.utils.validators import FieldError, LanguageValidator, ValidationResult


@dataclass
class Principal:
    """Authenticated caller as seen by business rules."""
    user_id: uuid.UUID
    is_admin: bool = False
    artist_status: Optional[str] = None

    @property
    def is_approved_artist(self) -> bool:
        return self.artist_status == "APPROVED"

    def owns(self, owner_id: uuid.UUID) -> bool:
        return self.user_id == owner_id

    def can_manage(self, owner_id: uuid.UUID) -> bool:
        """Owners and admins may mutate a resource."""
        return self.is_admin or self.owns(owner_id)


VALID_RELEASE_TYPES = {"album", "ep", "single", "compilation"}

SONG_EDITABLE_FIELDS = {
    "title",
    "language",
    "genre",
    "lyrics",
    "description",
    "audio_key",
    "cover_image_key",
    "track_number",
    "album_id",
}

ALBUM_EDITABLE_FIELDS = {
    "title",
    "description",
    "language",
    "release_type",
    "cover_image_key",
}


class SongRules:
    """Business rules for song authoring."""

    @staticmethod
    def validate_song_creation(song_data: Dict[str, Any]) -> ValidationResult:
        """Validate song creation request."""
        errors = []

        # Title and lyrics are both mandatory
        if not song_data.get("title") or len(song_data["title"].strip()) == 0:
            errors.append(FieldError(
                field="title",
                code="TITLE_REQUIRED",
                message="Song title is required"
            ))

        if not song_data.get("lyrics") or len(song_data["lyrics"].strip()) == 0:
            errors.append(FieldError(
                field="lyrics",
                code="LYRICS_REQUIRED",
                message="Song lyrics are required"
            ))

        if len(song_data.get("title") or "") > 500:
            errors.append(FieldError(
                field="title",
                code="TITLE_TOO_LONG",
                message="Title cannot exceed 500 characters"
            ))

        errors.extend(LanguageValidator.validate(song_data.get("language")))

        track_number = song_data.get("track_number")
        if track_number is not None and track_number <= 0:
            errors.append(FieldError(
                field="track_number",
                code="INVALID_TRACK_NUMBER",
                message="Track number must be positive"
            ))

        genre = song_data.get("genre")
        if genre and len(genre) > 100:
            errors.append(FieldError(
                field="genre",
                code="GENRE_TOO_LONG",
                message="Genre cannot exceed 100 characters"
            ))

        return ValidationResult(is_valid=len(errors) == 0, errors=errors)

    @staticmethod
    def validate_song_update(song_data: Dict[str, Any]) -> ValidationResult:
        """Validate a partial song update."""
        errors = []

        if not song_data:
            errors.append(FieldError(
                field="data",
                code="NO_FIELDS_TO_UPDATE",
                message="No fields to update"
            ))

        for field in ("title", "lyrics"):
            if field in song_data and (
                song_data[field] is None or len(str(song_data[field]).strip()) == 0
            ):
                errors.append(FieldError(
                    field=field,
                    code=f"{field.upper()}_REQUIRED",
                    message=f"Song {field} cannot be empty"
                ))

        for field in song_data:
            if field not in SONG_EDITABLE_FIELDS:
                errors.append(FieldError(
                    field=field,
                    code="FIELD_NOT_EDITABLE",
                    message=f"Field '{field}' cannot be updated"
                ))

        errors.extend(LanguageValidator.validate(song_data.get("language")))

        return ValidationResult(is_valid=len(errors) == 0, errors=errors)


class AlbumRules:
    """Business rules for album authoring."""

    @staticmethod
    def validate_album_creation(album_data: Dict[str, Any]) -> ValidationResult:
        """Validate album creation request."""
        errors = []

        if not album_data.get("title") or len(album_data["title"].strip()) == 0:
            errors.append(FieldError(
                field="title",
                code="TITLE_REQUIRED",
                message="Album title is required"
            ))

        release_type = album_data.get("release_type")
        if release_type and release_type not in VALID_RELEASE_TYPES:
            errors.append(FieldError(
                field="release_type",
                code="INVALID_RELEASE_TYPE",
                message=f"Release type must be one of: {sorted(VALID_RELEASE_TYPES)}"
            ))

        errors.extend(LanguageValidator.validate(album_data.get("language")))

        return ValidationResult(is_valid=len(errors) == 0, errors=errors)

    @staticmethod
    def validate_album_update(album_data: Dict[str, Any]) -> ValidationResult:
        """Validate a partial album update."""
        errors = []

        if not album_data:
            errors.append(FieldError(
                field="data",
                code="NO_FIELDS_TO_UPDATE",
                message="No fields to update"
            ))

        for field in album_data:
            if field not in ALBUM_EDITABLE_FIELDS:
                errors.append(FieldError(
                    field=field,
                    code="FIELD_NOT_EDITABLE",
                    message=f"Field '{field}' cannot be updated"
                ))

        if "title" in album_data and not (album_data["title"] or "").strip():
            errors.append(FieldError(
                field="title",
                code="TITLE_REQUIRED",
                message="Album title cannot be empty"
            ))

        release_type = album_data.get("release_type")
        if release_type and release_type not in VALID_RELEASE_TYPES:
            errors.append(FieldError(
                field="release_type",
                code="INVALID_RELEASE_TYPE",
                message=f"Release type must be one of: {sorted(VALID_RELEASE_TYPES)}"
            ))

        errors.extend(LanguageValidator.validate(album_data.get("language")))

        return ValidationResult(is_valid=len(errors) == 0, errors=errors)
