"""create user, word, duel and duel_response tables

Revision ID: 5c2d9e71a0b4
Revises:
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2d9e71a0b4'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('password_hash', sa.String(length=256), nullable=False),
    )
    op.create_index('ix_user_username', 'user', ['username'], unique=True)

    op.create_table(
        'word',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('original_word', sa.String(length=255), nullable=False),
        sa.Column('translated_word', sa.String(length=255), nullable=False),
        sa.Column('language', sa.String(length=16), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_word_user_id', 'word', ['user_id'])
    op.create_index('ix_word_language', 'word', ['language'])

    op.create_table(
        'duel',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('challenger_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('opponent_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('word_count', sa.Integer(), nullable=False),
        sa.Column('words', sa.JSON(), nullable=False),
        sa.Column('challenger_score', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('opponent_score', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('challenger_time_ms', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('opponent_time_ms', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('winner_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=True),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('started_at', sa.DateTime(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_duel_challenger_id', 'duel', ['challenger_id'])
    op.create_index('ix_duel_opponent_id', 'duel', ['opponent_id'])
    op.create_index('ix_duel_status', 'duel', ['status'])

    op.create_table(
        'duel_response',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('duel_id', sa.String(length=36), sa.ForeignKey('duel.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('word_index', sa.Integer(), nullable=False),
        sa.Column('is_correct', sa.Boolean(), nullable=False),
        sa.Column('response_time_ms', sa.Integer(), nullable=False),
        sa.Column('submitted_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('duel_id', 'user_id', 'word_index', name='uq_duel_response_word'),
    )
    op.create_index('ix_duel_response_duel_id', 'duel_response', ['duel_id'])


def downgrade():
    op.drop_index('ix_duel_response_duel_id', table_name='duel_response')
    op.drop_table('duel_response')
    op.drop_index('ix_duel_status', table_name='duel')
    op.drop_index('ix_duel_opponent_id', table_name='duel')
    op.drop_index('ix_duel_challenger_id', table_name='duel')
    op.drop_table('duel')
    op.drop_index('ix_word_language', table_name='word')
    op.drop_index('ix_word_user_id', table_name='word')
    op.drop_table('word')
    op.drop_index('ix_user_username', table_name='user')
    op.drop_table('user')
