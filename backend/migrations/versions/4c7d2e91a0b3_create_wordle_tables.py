"""create game record, lobby and multiplayer tables

Revision ID: 4c7d2e91a0b3
Revises:
Create Date: 2026-03-02 10:12:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4c7d2e91a0b3'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'wordle_games' not in existing_tables:
        op.create_table(
            'wordle_games',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('client_game_id', sa.String(length=128), nullable=False, unique=True),
            sa.Column('device_id', sa.String(length=128), nullable=False),
            sa.Column('username', sa.String(length=64), nullable=True),
            sa.Column('start_time', sa.DateTime(), nullable=False),
            sa.Column('end_time', sa.DateTime(), nullable=False),
            sa.Column('target_word', sa.String(length=16), nullable=False),
            sa.Column('outcome', sa.String(length=16), nullable=False),
            sa.Column('guesses_count', sa.Integer(), nullable=False),
            sa.Column('guesses_json', sa.JSON(), nullable=False),
            sa.Column('remaining_counts_json', sa.JSON(), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=True),
            sa.Column('updated_at', sa.DateTime(), nullable=True),
        )
        op.create_index('ix_wordle_games_device_id', 'wordle_games', ['device_id'])
        op.create_index('ix_wordle_games_username', 'wordle_games', ['username'])
        op.create_index('ix_wordle_games_end_time', 'wordle_games', ['end_time'])
    else:
        # Databases created before remaining counts were tracked
        cols = {c['name'] for c in insp.get_columns('wordle_games')}
        if 'remaining_counts_json' not in cols:
            op.add_column('wordle_games', sa.Column('remaining_counts_json', sa.JSON(), nullable=True))
        if 'username' not in cols:
            op.add_column('wordle_games', sa.Column('username', sa.String(length=64), nullable=True))

    if 'multiplayer_lobby' not in existing_tables:
        op.create_table(
            'multiplayer_lobby',
            sa.Column('username', sa.String(length=64), primary_key=True),
            sa.Column('last_seen', sa.DateTime(), nullable=False),
        )
        op.create_index('ix_multiplayer_lobby_last_seen', 'multiplayer_lobby', ['last_seen'])

    if 'multiplayer_rooms' not in existing_tables:
        op.create_table(
            'multiplayer_rooms',
            sa.Column('id', sa.String(length=36), primary_key=True),
            sa.Column('host_username', sa.String(length=64), nullable=False),
            sa.Column('status', sa.String(length=16), nullable=False, server_default='lobby'),
            sa.Column('target_word', sa.String(length=16), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('started_at', sa.DateTime(), nullable=True),
            sa.Column('ended_at', sa.DateTime(), nullable=True),
        )

    if 'multiplayer_players' not in existing_tables:
        op.create_table(
            'multiplayer_players',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('room_id', sa.String(length=36), sa.ForeignKey('multiplayer_rooms.id', ondelete='CASCADE'), nullable=False),
            sa.Column('username', sa.String(length=64), nullable=False),
            sa.Column('role', sa.String(length=16), nullable=False, server_default='player'),
            sa.Column('status', sa.String(length=16), nullable=False, server_default='invited'),
            sa.Column('guesses_count', sa.Integer(), nullable=True),
            sa.Column('finished_at', sa.DateTime(), nullable=True),
            sa.UniqueConstraint('room_id', 'username', name='uq_multiplayer_players_room_username'),
        )
        op.create_index('ix_multiplayer_players_room_id', 'multiplayer_players', ['room_id'])


def downgrade():
    op.drop_index('ix_multiplayer_players_room_id', table_name='multiplayer_players')
    op.drop_table('multiplayer_players')
    op.drop_table('multiplayer_rooms')
    op.drop_index('ix_multiplayer_lobby_last_seen', table_name='multiplayer_lobby')
    op.drop_table('multiplayer_lobby')
    op.drop_index('ix_wordle_games_end_time', table_name='wordle_games')
    op.drop_index('ix_wordle_games_username', table_name='wordle_games')
    op.drop_index('ix_wordle_games_device_id', table_name='wordle_games')
    op.drop_table('wordle_games')
