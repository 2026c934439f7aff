#!/usr/bin/env python3
import sys
import logging
import argparse
import json
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError

# Add project root to path
sys.path.insert(0, ".")

from core.db import Database
from core.logging import setup_json_logging
from core.models import Comment, Follow, Like, User, Video

logger = logging.getLogger(__name__)


def _followers_of_user():
    return select(func.count(Follow.id)).where(Follow.following_id == User.id).scalar_subquery()


def _followed_by_user():
    return select(func.count(Follow.id)).where(Follow.follower_id == User.id).scalar_subquery()


def _likes_received_by_user():
    on_videos = (
        select(func.count(Like.id))
        .join(Video, Like.video_id == Video.id)
        .where(Video.user_id == User.id)
        .scalar_subquery()
    )
    on_comments = (
        select(func.count(Like.id))
        .join(Comment, Like.comment_id == Comment.id)
        .where(Comment.user_id == User.id)
        .scalar_subquery()
    )
    return on_videos + on_comments


def _likes_on_video():
    return select(func.count(Like.id)).where(Like.video_id == Video.id).scalar_subquery()


def _comments_on_video():
    return select(func.count(Comment.id)).where(Comment.video_id == Video.id).scalar_subquery()


def _likes_on_comment():
    return select(func.count(Like.id)).where(Like.comment_id == Comment.id).scalar_subquery()


# (model, counter column, expression recounting it from ledger rows)
COUNTERS: List[Tuple[type, str, Callable]] = [
    (User, "followers_count", _followers_of_user),
    (User, "following_count", _followed_by_user),
    (User, "likes_count", _likes_received_by_user),
    (Video, "likes_count", _likes_on_video),
    (Video, "comments_count", _comments_on_video),
    (Comment, "likes_count", _likes_on_comment),
]


class CounterReconciler:
    """Re-derive every denormalized counter from follows/likes/comments rows"""

    def __init__(self, database: Optional[Database] = None):
        self._owns_database = database is None
        self.database = (database or Database.from_settings()).connect()
        self.db = self.database.session()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.db.close()
        if self._owns_database:
            self.database.dispose()

    def reconcile(self, dry_run: bool = False) -> Dict[str, int]:
        """
        Overwrite drifted counters with recounted values.

        Returns:
            Dict[str, int]: Rows corrected (or that would be, on a dry run)
            per ``table.column``
        """
        trace_id = f"reconcile_counters_{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}"
        corrected: Dict[str, int] = {}

        logger.info("Starting counter reconciliation", extra={
            "trace_id": trace_id,
            "job": "reconcile_counters",
            "dry_run": dry_run
        })

        try:
            for model, field, recount in COUNTERS:
                key = f"{model.__tablename__}.{field}"
                column = getattr(model, field)
                expected = recount()

                if dry_run:
                    drifted = self.db.execute(
                        select(func.count()).select_from(model).where(column != expected)
                    ).scalar_one()
                else:
                    result = self.db.execute(
                        update(model)
                        .where(column != expected)
                        .values({field: recount()})
                        .execution_options(synchronize_session=False)
                    )
                    drifted = result.rowcount

                corrected[key] = drifted
                if drifted:
                    logger.warning(f"Counter drift on {key}", extra={
                        "trace_id": trace_id,
                        "job": "reconcile_counters",
                        "target": key,
                        "rows": drifted
                    })

            if dry_run:
                self.db.rollback()
            else:
                self.db.commit()

        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Counter reconciliation failed: {e}", extra={
                "trace_id": trace_id,
                "job": "reconcile_counters"
            })
            raise

        logger.info("Counter reconciliation completed", extra={
            "trace_id": trace_id,
            "job": "reconcile_counters",
            "corrected": sum(corrected.values())
        })
        return corrected


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Recompute engagement counters from ledger rows")
    parser.add_argument("--dry-run", action="store_true", help="Report drift without writing")

    args = parser.parse_args(argv)

    setup_json_logging()

    with CounterReconciler() as reconciler:
        corrected = reconciler.reconcile(dry_run=args.dry_run)

    print(json.dumps({
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "dry_run": args.dry_run,
        "corrected": corrected
    }, indent=2))


if __name__ == "__main__":
    main()
