"""Unit tests for DTO validation rules"""
import pytest
from pydantic import TypeAdapter, ValidationError

from service.dto import (
    CommentCreateDTO,
    CommentTarget,
    LikeTarget,
    UserPublicDTO,
    VideoCreateDTO,
    VideoTarget,
    coerce_is_public,
)


class TestIsPublicCoercion:
    """Visibility flag parsing"""

    @pytest.mark.parametrize("raw,expected", [
        (True, True),
        (False, False),
        ("true", True),
        ("FALSE", False),
        (" True ", True),
        (None, True),
    ])
    def test_accepted_values(self, raw, expected):
        assert coerce_is_public(raw) is expected

    @pytest.mark.parametrize("raw", ["yes", "1", 1, 0, "", [True]])
    def test_rejected_values(self, raw):
        with pytest.raises(ValueError):
            coerce_is_public(raw)

    def test_video_create_defaults_to_public(self):
        dto = VideoCreateDTO(video_url="https://cdn.example.com/a.mp4")
        assert dto.is_public is True

    def test_video_create_parses_string_flag(self):
        dto = VideoCreateDTO(video_url="https://cdn.example.com/a.mp4", is_public="false")
        assert dto.is_public is False

    def test_video_create_rejects_unknown_flag(self):
        with pytest.raises(ValidationError):
            VideoCreateDTO(video_url="https://cdn.example.com/a.mp4", is_public="maybe")

    def test_video_create_requires_url(self):
        with pytest.raises(ValidationError):
            VideoCreateDTO(video_url="")


class TestLikeTarget:
    """A like names exactly one video or comment"""

    adapter = TypeAdapter(LikeTarget)

    def test_video_target(self):
        target = self.adapter.validate_python({"kind": "video", "video_id": 5})
        assert isinstance(target, VideoTarget)
        assert target.video_id == 5

    def test_comment_target(self):
        target = self.adapter.validate_python({"kind": "comment", "comment_id": 7})
        assert isinstance(target, CommentTarget)

    def test_neither_rejected(self):
        with pytest.raises(ValidationError):
            self.adapter.validate_python({"kind": "video"})

    def test_both_rejected(self):
        """A second target id is not accepted alongside the first"""
        with pytest.raises(ValidationError):
            self.adapter.validate_python({"kind": "video", "video_id": 5, "comment_id": 7})

    def test_mismatched_kind_rejected(self):
        with pytest.raises(ValidationError):
            self.adapter.validate_python({"kind": "comment", "video_id": 5})

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            self.adapter.validate_python({"kind": "user", "video_id": 5})


class TestCommentCreate:

    def test_blank_content_rejected(self):
        with pytest.raises(ValidationError):
            CommentCreateDTO(content="   ")

    def test_content_kept_verbatim(self):
        assert CommentCreateDTO(content=" hi ").content == " hi "


class TestPublicProjection:

    def test_excludes_private_fields(self):
        """Email and verification flags never appear in the public projection"""
        fields = set(UserPublicDTO.model_fields)
        assert "email" not in fields
        assert "is_email_verified" not in fields
