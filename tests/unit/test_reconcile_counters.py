"""Unit tests for counter reconciliation"""
import json

from core.models import User, Video
from jobs import reconcile_counters
from jobs.reconcile_counters import CounterReconciler
from service.content_service import create_comment
from service.dto import VideoTarget
from service.ledger_service import toggle_follow, toggle_like


class TestCounterReconciler:
    """Counters re-derived from ledger rows"""

    def _drift(self, session, alice, bob, make_video):
        video = make_video(alice.id)
        toggle_like(bob.id, VideoTarget(video_id=video.id), session=session, trace_id="t")
        toggle_follow(bob.id, alice.id, session=session, trace_id="t")
        create_comment(video.id, bob.id, "hi", session=session, trace_id="t")

        row = session.get(Video, video.id)
        row.likes_count = 9
        row.comments_count = 0
        session.get(User, alice.id).followers_count = 0
        session.commit()
        return video

    def test_repairs_drift(self, database, session, alice, bob, make_video):
        video = self._drift(session, alice, bob, make_video)

        with CounterReconciler(database) as reconciler:
            corrected = reconciler.reconcile()

        assert corrected["videos.likes_count"] == 1
        assert corrected["videos.comments_count"] == 1
        assert corrected["users.followers_count"] == 1
        assert corrected["users.following_count"] == 0

        session.expire_all()
        assert session.get(Video, video.id).likes_count == 1
        assert session.get(Video, video.id).comments_count == 1
        assert session.get(User, alice.id).followers_count == 1
        assert session.get(User, alice.id).likes_count == 1

    def test_dry_run_reports_without_writing(self, database, session, alice, bob, make_video):
        video = self._drift(session, alice, bob, make_video)

        with CounterReconciler(database) as reconciler:
            corrected = reconciler.reconcile(dry_run=True)

        assert corrected["videos.likes_count"] == 1
        session.expire_all()
        assert session.get(Video, video.id).likes_count == 9

    def test_consistent_store_needs_no_changes(self, database, session, alice, bob, make_video):
        video = make_video(alice.id)
        toggle_like(bob.id, VideoTarget(video_id=video.id), session=session, trace_id="t")

        with CounterReconciler(database) as reconciler:
            corrected = reconciler.reconcile()

        assert sum(corrected.values()) == 0

    def test_injected_database_stays_connected(self, database):
        with CounterReconciler(database) as reconciler:
            reconciler.reconcile()

        assert database.engine is not None

    def test_cli_prints_summary(self, database, monkeypatch, capsys):
        monkeypatch.setattr(reconcile_counters, "setup_json_logging", lambda: None)
        monkeypatch.setattr(reconcile_counters.Database, "from_settings", classmethod(lambda cls: database))

        reconcile_counters.main(["--dry-run"])

        out = json.loads(capsys.readouterr().out)
        assert out["dry_run"] is True
        assert "videos.likes_count" in out["corrected"]
