"""Unit tests for relative counter adjustments"""
from core.models import User, Video
from service.counters import adjust_counter


class TestAdjustCounter:
    """Relative updates and the zero floor"""

    def test_increment_is_relative(self, session, alice, make_video):
        """Two increments on the same row both land"""
        video = make_video(alice.id)

        assert adjust_counter(session, Video, video.id, "likes_count", 1)
        assert adjust_counter(session, Video, video.id, "likes_count", 1)
        session.commit()

        assert session.get(Video, video.id).likes_count == 2

    def test_decrement_never_goes_below_zero(self, session, alice):
        """A decrement on a zero counter leaves it at zero"""
        assert adjust_counter(session, User, alice.id, "followers_count", -1)
        session.commit()

        assert session.get(User, alice.id).followers_count == 0

    def test_large_decrement_clamps_at_zero(self, session, alice, make_video):
        """Decrement larger than the current value clamps at zero"""
        video = make_video(alice.id)
        adjust_counter(session, Video, video.id, "comments_count", 2)
        adjust_counter(session, Video, video.id, "comments_count", -5)
        session.commit()

        assert session.get(Video, video.id).comments_count == 0

    def test_missing_row_reports_false(self, session):
        """No matching row is reported, not raised"""
        assert adjust_counter(session, Video, 999999, "likes_count", 1) is False
        session.rollback()

    def test_does_not_commit(self, session, alice, make_video):
        """Caller owns the transaction; a rollback discards the adjustment"""
        video = make_video(alice.id)
        adjust_counter(session, Video, video.id, "likes_count", 3)
        session.rollback()

        assert session.get(Video, video.id).likes_count == 0
