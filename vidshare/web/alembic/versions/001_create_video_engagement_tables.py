"""create_video_engagement_tables

Revision ID: 001
Revises:
Create Date: 2026-10-16 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create users table
    op.create_table('users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('display_label', sa.String(length=255), nullable=False),
        sa.Column('is_admin', sa.Boolean(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    # Create videos table
    op.create_table('videos',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('video_id', sa.String(length=100), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('thumbnail', sa.String(length=500), nullable=False),
        sa.Column('url', sa.String(length=500), nullable=False),
        sa.Column('duration', sa.String(length=20), nullable=False),
        sa.Column('category', sa.String(length=50), nullable=False),
        sa.Column('year', sa.String(length=4), nullable=False),
        sa.Column('rating', sa.Enum('G', 'PG', 'PG-13', 'R', 'NC-17', name='contentrating'), nullable=False),
        sa.Column('upload_date', sa.String(length=10), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=True),
        sa.Column('view_count', sa.BigInteger(), nullable=False),
        sa.Column('likes_count', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('view_count >= 0', name='ck_video_view_count_non_negative'),
        sa.CheckConstraint('likes_count >= 0', name='ck_video_likes_count_non_negative'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_videos_video_id'), 'videos', ['video_id'], unique=True)
    op.create_index(op.f('ix_videos_category'), 'videos', ['category'], unique=False)
    op.create_index(op.f('ix_videos_year'), 'videos', ['year'], unique=False)
    op.create_index(op.f('ix_videos_owner_id'), 'videos', ['owner_id'], unique=False)
    op.create_index(op.f('ix_videos_created_at'), 'videos', ['created_at'], unique=False)

    # Create video_comments table
    op.create_table('video_comments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('video_id', sa.String(length=100), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_video_comments_video_id'), 'video_comments', ['video_id'], unique=False)
    op.create_index(op.f('ix_video_comments_user_id'), 'video_comments', ['user_id'], unique=False)
    op.create_index(op.f('ix_video_comments_created_at'), 'video_comments', ['created_at'], unique=False)
    op.create_index('ix_video_comments_video_created', 'video_comments', ['video_id', 'created_at'], unique=False)

    # Create video_likes table
    op.create_table('video_likes',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('video_id', sa.String(length=100), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'video_id', name='uq_video_user_like')
    )
    op.create_index(op.f('ix_video_likes_video_id'), 'video_likes', ['video_id'], unique=False)
    op.create_index(op.f('ix_video_likes_user_id'), 'video_likes', ['user_id'], unique=False)

    # Create video_playlists table
    op.create_table('video_playlists',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('thumbnail', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('owner_id', 'name', name='uq_playlist_owner_name')
    )
    op.create_index(op.f('ix_video_playlists_owner_id'), 'video_playlists', ['owner_id'], unique=False)
    op.create_index(op.f('ix_video_playlists_created_at'), 'video_playlists', ['created_at'], unique=False)

    # Create video_playlist_items table
    op.create_table('video_playlist_items',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('playlist_id', sa.Uuid(), nullable=False),
        sa.Column('video_id', sa.String(length=100), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('added_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['playlist_id'], ['video_playlists.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('playlist_id', 'video_id', name='uq_playlist_video')
    )
    op.create_index(op.f('ix_video_playlist_items_playlist_id'), 'video_playlist_items', ['playlist_id'], unique=False)


def downgrade() -> None:
    # Drop video_playlist_items table
    op.drop_index(op.f('ix_video_playlist_items_playlist_id'), table_name='video_playlist_items')
    op.drop_table('video_playlist_items')

    # Drop video_playlists table
    op.drop_index(op.f('ix_video_playlists_created_at'), table_name='video_playlists')
    op.drop_index(op.f('ix_video_playlists_owner_id'), table_name='video_playlists')
    op.drop_table('video_playlists')

    # Drop video_likes table
    op.drop_index(op.f('ix_video_likes_user_id'), table_name='video_likes')
    op.drop_index(op.f('ix_video_likes_video_id'), table_name='video_likes')
    op.drop_table('video_likes')

    # Drop video_comments table
    op.drop_index('ix_video_comments_video_created', table_name='video_comments')
    op.drop_index(op.f('ix_video_comments_created_at'), table_name='video_comments')
    op.drop_index(op.f('ix_video_comments_user_id'), table_name='video_comments')
    op.drop_index(op.f('ix_video_comments_video_id'), table_name='video_comments')
    op.drop_table('video_comments')

    # Drop videos table
    op.drop_index(op.f('ix_videos_created_at'), table_name='videos')
    op.drop_index(op.f('ix_videos_owner_id'), table_name='videos')
    op.drop_index(op.f('ix_videos_year'), table_name='videos')
    op.drop_index(op.f('ix_videos_category'), table_name='videos')
    op.drop_index(op.f('ix_videos_video_id'), table_name='videos')
    op.drop_table('videos')
    sa.Enum(name='contentrating').drop(op.get_bind(), checkfirst=True)

    # Drop users table
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
