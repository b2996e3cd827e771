"""create user, room, membership, question, round, session and answer tables

Revision ID: 5c2e7a91b3d0
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2e7a91b3d0'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'user' not in existing_tables:
        op.create_table(
            'user',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('username', sa.String(length=64), nullable=False),
            sa.Column('password_hash', sa.String(length=256), nullable=False),
            sa.Column('display_name', sa.String(length=64), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
        )
        op.create_index('ix_user_username', 'user', ['username'], unique=True)

    if 'room' not in existing_tables:
        op.create_table(
            'room',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('code', sa.String(length=10), nullable=False),
            sa.Column('owner_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
            sa.Column('status', sa.String(length=16), nullable=False),
            sa.Column('current_question_index', sa.Integer(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
        )
        op.create_index('ix_room_code', 'room', ['code'], unique=True)

    if 'room_member' not in existing_tables:
        op.create_table(
            'room_member',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('room_id', sa.Integer(), sa.ForeignKey('room.id'), nullable=False),
            sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
            sa.Column('joined_at', sa.DateTime(), nullable=False),
            sa.UniqueConstraint('room_id', 'user_id', name='uq_room_member_room_user'),
        )
        op.create_index('ix_room_member_room_id', 'room_member', ['room_id'])

    if 'question' not in existing_tables:
        op.create_table(
            'question',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('created_by', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
            sa.Column('room_id', sa.Integer(), sa.ForeignKey('room.id'), nullable=True),
            sa.Column('question_text', sa.Text(), nullable=False),
            sa.Column('correct_answer', sa.String(length=255), nullable=False),
            sa.Column('wrong_answer_1', sa.String(length=255), nullable=False),
            sa.Column('wrong_answer_2', sa.String(length=255), nullable=False),
            sa.Column('wrong_answer_3', sa.String(length=255), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
        )
        op.create_index('ix_question_created_by', 'question', ['created_by'])
        op.create_index('ix_question_room_id', 'question', ['room_id'])

    if 'question_round' not in existing_tables:
        op.create_table(
            'question_round',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('room_id', sa.Integer(), sa.ForeignKey('room.id'), nullable=False),
            sa.Column('question_index', sa.Integer(), nullable=False),
            sa.Column('started_at', sa.Float(), nullable=False),
            sa.UniqueConstraint('room_id', 'question_index', name='uq_question_round_room_index'),
        )
        op.create_index('ix_question_round_room_id', 'question_round', ['room_id'])

    if 'game_session' not in existing_tables:
        op.create_table(
            'game_session',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('room_id', sa.Integer(), sa.ForeignKey('room.id'), nullable=True),
            sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
            sa.Column('started_at', sa.DateTime(), nullable=False),
            sa.Column('ended_at', sa.DateTime(), nullable=True),
            sa.Column('final_score', sa.Integer(), nullable=False),
        )
        op.create_index('ix_game_session_room_id', 'game_session', ['room_id'])
        op.create_index('ix_game_session_user_id', 'game_session', ['user_id'])

    if 'player_answer' not in existing_tables:
        op.create_table(
            'player_answer',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('game_session_id', sa.Integer(), sa.ForeignKey('game_session.id'), nullable=False),
            sa.Column('question_id', sa.Integer(), sa.ForeignKey('question.id'), nullable=False),
            sa.Column('selected_answer', sa.String(length=255), nullable=False),
            sa.Column('is_correct', sa.Boolean(), nullable=False),
            sa.Column('points_earned', sa.Integer(), nullable=False),
            sa.Column('time_to_answer', sa.Integer(), nullable=False),
            sa.Column('answered_at', sa.DateTime(), nullable=False),
            sa.UniqueConstraint('game_session_id', 'question_id', name='uq_player_answer_session_question'),
        )
        op.create_index('ix_player_answer_game_session_id', 'player_answer', ['game_session_id'])


def downgrade():
    op.drop_table('player_answer')
    op.drop_table('game_session')
    op.drop_table('question_round')
    op.drop_table('question')
    op.drop_table('room_member')
    op.drop_table('room')
    op.drop_table('user')
