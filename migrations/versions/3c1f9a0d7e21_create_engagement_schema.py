"""create users, videos, comments, likes and follows

Revision ID: 3c1f9a0d7e21
Revises:
Create Date: 2026-10-19 09:12:44.118302

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3c1f9a0d7e21'
down_revision = None
branch_labels = None
depends_on = None

BIGINT_ID = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False, unique=True),
        sa.Column('first_name', sa.String()),
        sa.Column('last_name', sa.String()),
        sa.Column('profile_image_url', sa.String()),
        sa.Column('username', sa.String(), unique=True),
        sa.Column('bio', sa.Text()),
        sa.Column('followers_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('following_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('likes_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_email_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'videos',
        sa.Column('id', BIGINT_ID, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('title', sa.Text()),
        sa.Column('description', sa.Text()),
        sa.Column('video_url', sa.Text(), nullable=False),
        sa.Column('thumbnail_url', sa.Text()),
        sa.Column('duration', sa.Integer()),
        sa.Column('likes_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('comments_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('views_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_public', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('idx_videos_public_created', 'videos', ['is_public', 'created_at'])
    op.create_index('idx_videos_user_created', 'videos', ['user_id', 'created_at'])

    op.create_table(
        'comments',
        sa.Column('id', BIGINT_ID, primary_key=True, autoincrement=True),
        sa.Column('video_id', BIGINT_ID, sa.ForeignKey('videos.id'), nullable=False),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('likes_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('idx_comments_video_created', 'comments', ['video_id', 'created_at'])

    op.create_table(
        'likes',
        sa.Column('id', BIGINT_ID, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('video_id', BIGINT_ID, sa.ForeignKey('videos.id'), nullable=True),
        sa.Column('comment_id', BIGINT_ID, sa.ForeignKey('comments.id'), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('user_id', 'video_id', name='uq_likes_user_video'),
        sa.UniqueConstraint('user_id', 'comment_id', name='uq_likes_user_comment'),
        sa.CheckConstraint('(video_id IS NULL) <> (comment_id IS NULL)', name='ck_likes_single_target'),
    )

    op.create_table(
        'follows',
        sa.Column('id', BIGINT_ID, primary_key=True, autoincrement=True),
        sa.Column('follower_id', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('following_id', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('follower_id', 'following_id', name='uq_follows_pair'),
    )
    op.create_index('idx_follows_following', 'follows', ['following_id'])


def downgrade() -> None:
    op.drop_index('idx_follows_following', table_name='follows')
    op.drop_table('follows')
    op.drop_table('likes')
    op.drop_index('idx_comments_video_created', table_name='comments')
    op.drop_table('comments')
    op.drop_index('idx_videos_user_created', table_name='videos')
    op.drop_index('idx_videos_public_created', table_name='videos')
    op.drop_table('videos')
    op.drop_table('users')
