"""initial tables

Revision ID: 001
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(updated: bool = True):
    columns = [sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now())]
    if updated:
        columns.append(sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()))
    return columns


def upgrade() -> None:
    # Users
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('password', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), nullable=False, server_default='User'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('country', sa.String(100), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('birthdate', sa.Date(), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('web_site', sa.String(255), nullable=True),
        sa.Column('cin', sa.String(20), nullable=True),
        sa.Column('passport', sa.String(20), nullable=True),
        sa.Column('profile_picture', sa.String(500), nullable=True),
        sa.Column('is_email_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_complete_profile', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_phone_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('score', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('otp_code', sa.String(10), nullable=True),
        sa.Column('otp_code_expires_at', sa.DateTime(), nullable=True),
        sa.Column('last_logout_at', sa.DateTime(), nullable=True),
        sa.Column('nb_offer', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('nb_connects', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('nb_posts', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('time_spent', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'blacklisted_tokens',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('token_hash', sa.String(64), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=True),
        sa.Column('reason', sa.String(100), nullable=False, server_default='logout'),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('blacklisted_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
    )
    op.create_index('ix_blacklisted_tokens_token_hash', 'blacklisted_tokens', ['token_hash'], unique=True)
    op.create_index('ix_blacklisted_tokens_user_id', 'blacklisted_tokens', ['user_id'])
    op.create_index('ix_blacklisted_tokens_expires_at', 'blacklisted_tokens', ['expires_at'])
    op.create_index('ix_blacklisted_tokens_blacklisted_at', 'blacklisted_tokens', ['blacklisted_at'])

    # Teams and profile records
    op.create_table(
        'teams',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_teams_name', 'teams', ['name'])

    op.create_table(
        'team_users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('team_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['team_id'], ['teams.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('team_id', 'user_id', name='uq_team_user'),
    )
    op.create_index('ix_team_users_team_id', 'team_users', ['team_id'])
    op.create_index('ix_team_users_user_id', 'team_users', ['user_id'])

    op.create_table(
        'social_media',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('platform', sa.String(50), nullable=False),
        sa.Column('url', sa.String(500), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', 'platform', name='uq_social_media_user_platform'),
    )
    op.create_index('ix_social_media_user_id', 'social_media', ['user_id'])

    op.create_table(
        'experience_education',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('organization', sa.String(255), nullable=False),
        sa.Column('degree', sa.String(255), nullable=True),
        sa.Column('field_of_study', sa.String(255), nullable=True),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('website', sa.String(500), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('type_of_experience', sa.String(20), nullable=False, server_default='EXPERIENCE'),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_experience_education_user_id', 'experience_education', ['user_id'])

    op.create_table(
        'follows',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('follower_id', sa.Uuid(), nullable=False),
        sa.Column('following_id', sa.Uuid(), nullable=False),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['follower_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['following_id'], ['users.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('follower_id', 'following_id', name='uq_follow_pair'),
    )
    op.create_index('ix_follows_follower_id', 'follows', ['follower_id'])
    op.create_index('ix_follows_following_id', 'follows', ['following_id'])

    op.create_table(
        'blocks',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('blocked_user_id', sa.Uuid(), nullable=False),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['blocked_user_id'], ['users.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', 'blocked_user_id', name='uq_block_pair'),
    )
    op.create_index('ix_blocks_user_id', 'blocks', ['user_id'])

    op.create_table(
        'attempt_logs',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('ip_address', sa.String(64), nullable=True),
        sa.Column('success', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('reason', sa.String(255), nullable=True),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_attempt_logs_user_id', 'attempt_logs', ['user_id'])

    # Sectors and projects
    op.create_table(
        'sectors',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_sectors_name', 'sectors', ['name'], unique=True)

    op.create_table(
        'projects',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('creator_id', sa.Uuid(), nullable=False),
        sa.Column('sector_id', sa.Uuid(), nullable=False),
        sa.Column('team_id', sa.Uuid(), nullable=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('logo_image', sa.String(500), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('problem', sa.Text(), nullable=False),
        sa.Column('solution', sa.Text(), nullable=False),
        sa.Column('project_location', sa.String(255), nullable=False),
        sa.Column('team_size', sa.Integer(), nullable=False),
        sa.Column('customers_number', sa.Integer(), nullable=False),
        sa.Column('financial_goal', sa.Float(), nullable=False),
        sa.Column('monthly_revenue', sa.Float(), nullable=False),
        sa.Column('net_profit', sa.Float(), nullable=False, server_default='0'),
        sa.Column('min_percentage', sa.Integer(), nullable=False),
        sa.Column('max_percentage', sa.Integer(), nullable=False),
        sa.Column('percentage_unit_price', sa.Float(), nullable=False),
        sa.Column('runway', sa.Date(), nullable=False),
        sa.Column('market_plan', sa.Text(), nullable=False),
        sa.Column('business_plan', sa.Text(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='DRAFT'),
        sa.Column('project_stage', sa.String(20), nullable=False, server_default='IDEA'),
        sa.Column('success_probability', sa.Float(), nullable=True),
        sa.Column('verified_project', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('nb_offers', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('nb_connects', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('nb_likes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('nb_comments', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('nb_views', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['creator_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['sector_id'], ['sectors.id']),
        sa.ForeignKeyConstraint(['team_id'], ['teams.id'], ondelete='SET NULL'),
    )
    op.create_index('ix_projects_creator_id', 'projects', ['creator_id'])
    op.create_index('ix_projects_sector_id', 'projects', ['sector_id'])

    for table, columns in (
        ('partnerships', [
            sa.Column('name', sa.String(255), nullable=False),
            sa.Column('web_site', sa.String(500), nullable=True),
        ]),
        ('use_of_funds', [
            sa.Column('title', sa.String(255), nullable=False),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('use_percentage', sa.Float(), nullable=False),
        ]),
    ):
        op.create_table(
            table,
            sa.Column('id', sa.Uuid(), primary_key=True),
            sa.Column('project_id', sa.Uuid(), nullable=False),
            *columns,
            *_timestamps(updated=False),
            sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
        )
        op.create_index(f'ix_{table}_project_id', table, ['project_id'])

    op.create_table(
        'interests',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('sector_id', sa.Uuid(), nullable=False),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['sector_id'], ['sectors.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', 'sector_id', name='uq_interest_user_sector'),
    )
    op.create_index('ix_interests_user_id', 'interests', ['user_id'])
    op.create_index('ix_interests_sector_id', 'interests', ['sector_id'])

    op.create_table(
        'visitor_profile_projects',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=True),
        sa.Column('user_visitor_id', sa.Uuid(), nullable=False),
        sa.Column('project_id', sa.Uuid(), nullable=True),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_visitor_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_visitor_profile_projects_user_visitor_id', 'visitor_profile_projects', ['user_visitor_id'])

    op.create_table(
        'tags',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.String(500), nullable=True),
        *_timestamps(updated=False),
    )
    op.create_index('ix_tags_name', 'tags', ['name'], unique=True)

    op.create_table(
        'project_tags',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('project_id', sa.Uuid(), nullable=False),
        sa.Column('tag_id', sa.Uuid(), nullable=False),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['tag_id'], ['tags.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('project_id', 'tag_id', name='uq_project_tag'),
    )
    op.create_index('ix_project_tags_project_id', 'project_tags', ['project_id'])
    op.create_index('ix_project_tags_tag_id', 'project_tags', ['tag_id'])

    # Offers and connects
    op.create_table(
        'offers',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('project_id', sa.Uuid(), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('equity', sa.Float(), nullable=False),
        sa.Column('offer_description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='PENDING'),
        sa.Column('response_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_offers_user_id', 'offers', ['user_id'])
    op.create_index('ix_offers_project_id', 'offers', ['project_id'])
    op.create_index('ix_offers_status', 'offers', ['status'])

    op.create_table(
        'connects',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('project_id', sa.Uuid(), nullable=False),
        sa.Column('connect_status', sa.String(20), nullable=False, server_default='PENDING'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_connects_user_id', 'connects', ['user_id'])
    op.create_index('ix_connects_project_id', 'connects', ['project_id'])
    op.create_index('ix_connects_connect_status', 'connects', ['connect_status'])

    # Posts, media and videos
    op.create_table(
        'posts',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('is_public', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('ml_prediction', sa.String(255), nullable=True),
        sa.Column('nb_likes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('nb_comments', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('nb_views', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('nb_shares', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_posts_user_id', 'posts', ['user_id'])

    op.create_table(
        'post_media',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('post_id', sa.Uuid(), nullable=False),
        sa.Column('media_url', sa.String(500), nullable=False),
        sa.Column('media_type', sa.String(10), nullable=False),
        sa.Column('file_name', sa.String(255), nullable=False),
        sa.Column('file_size', sa.Integer(), nullable=False),
        sa.Column('mime_type', sa.String(100), nullable=False),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['post_id'], ['posts.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_post_media_post_id', 'post_media', ['post_id'])
    op.create_index('ix_post_media_media_type', 'post_media', ['media_type'])

    op.create_table(
        'post_shared',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('post_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('description', sa.String(500), nullable=True),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['post_id'], ['posts.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_post_shared_post_id', 'post_shared', ['post_id'])
    op.create_index('ix_post_shared_user_id', 'post_shared', ['user_id'])

    op.create_table(
        'videos',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('project_id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('video_url', sa.String(500), nullable=False),
        sa.Column('duration', sa.Float(), nullable=True),
        sa.Column('thumbnail_url', sa.String(500), nullable=True),
        sa.Column('nb_views', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_videos_project_id', 'videos', ['project_id'])

    op.create_table(
        'views',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('video_id', sa.Uuid(), nullable=False),
        sa.Column('timespent', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['video_id'], ['videos.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', 'video_id', name='uq_view_user_video'),
    )
    op.create_index('ix_views_user_id', 'views', ['user_id'])
    op.create_index('ix_views_video_id', 'views', ['video_id'])

    op.create_table(
        'project_files',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('project_id', sa.Uuid(), nullable=False),
        sa.Column('file_name', sa.String(255), nullable=False),
        sa.Column('file_path', sa.String(1000), nullable=False),
        sa.Column('file_type', sa.String(10), nullable=False),
        sa.Column('file_size', sa.Integer(), nullable=False),
        sa.Column('mime_type', sa.String(150), nullable=False),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_project_files_project_id', 'project_files', ['project_id'])

    # Comments and likes
    op.create_table(
        'comments',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('project_id', sa.Uuid(), nullable=True),
        sa.Column('post_id', sa.Uuid(), nullable=True),
        sa.Column('parent_id', sa.Uuid(), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('nb_likes', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['post_id'], ['posts.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['parent_id'], ['comments.id'], ondelete='CASCADE'),
    )
    for column in ('user_id', 'project_id', 'post_id', 'parent_id'):
        op.create_index(f'ix_comments_{column}', 'comments', [column])

    op.create_table(
        'likes',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('project_id', sa.Uuid(), nullable=True),
        sa.Column('post_id', sa.Uuid(), nullable=True),
        sa.Column('comment_id', sa.Uuid(), nullable=True),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['post_id'], ['posts.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['comment_id'], ['comments.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', 'project_id', name='uq_like_user_project'),
        sa.UniqueConstraint('user_id', 'post_id', name='uq_like_user_post'),
        sa.UniqueConstraint('user_id', 'comment_id', name='uq_like_user_comment'),
        sa.CheckConstraint(
            "(CASE WHEN project_id IS NULL THEN 0 ELSE 1 END"
            " + CASE WHEN post_id IS NULL THEN 0 ELSE 1 END"
            " + CASE WHEN comment_id IS NULL THEN 0 ELSE 1 END) = 1",
            name='ck_like_single_target',
        ),
    )
    for column in ('user_id', 'project_id', 'post_id', 'comment_id'):
        op.create_index(f'ix_likes_{column}', 'likes', [column])

    # Messaging
    op.create_table(
        'discussions',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('sender_id', sa.Uuid(), nullable=False),
        sa.Column('receiver_id', sa.Uuid(), nullable=False),
        sa.Column('type', sa.String(20), nullable=False, server_default='PRIVATE'),
        sa.Column('project_id', sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['sender_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['receiver_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
    )
    for column in ('sender_id', 'receiver_id', 'project_id', 'updated_at'):
        op.create_index(f'ix_discussions_{column}', 'discussions', [column])

    op.create_table(
        'messages',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('discussion_id', sa.Uuid(), nullable=False),
        sa.Column('sender_id', sa.Uuid(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['discussion_id'], ['discussions.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['sender_id'], ['users.id'], ondelete='CASCADE'),
    )
    for column in ('discussion_id', 'sender_id', 'created_at'):
        op.create_index(f'ix_messages_{column}', 'messages', [column])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('type', sa.String(30), nullable=False, server_default='OTHER'),
        sa.Column('title', sa.String(255), nullable=True),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    )
    for column in ('user_id', 'is_read', 'created_at'):
        op.create_index(f'ix_notifications_{column}', 'notifications', [column])


def downgrade() -> None:
    for table in (
        'notifications', 'messages', 'discussions',
        'likes', 'comments',
        'project_files', 'views', 'videos', 'post_shared', 'post_media', 'posts',
        'connects', 'offers',
        'project_tags', 'tags', 'visitor_profile_projects', 'interests', 'use_of_funds', 'partnerships',
        'projects', 'sectors',
        'attempt_logs', 'blocks', 'follows', 'experience_education', 'social_media', 'team_users', 'teams',
        'blacklisted_tokens', 'users',
    ):
        op.drop_table(table)
