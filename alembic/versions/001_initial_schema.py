"""Initial database schema

Revision ID: 001_initial
Revises: 
Create Date: 2024-01-01 00:00:00.000000

Tags: schema, initial
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create the members and admins tables if they don't exist.
    Databases created earlier with create_all_tables.py are left untouched.
    """
    connection = op.get_bind()
    inspector = sa.inspect(connection)
    existing_tables = set(inspector.get_table_names())

    if 'members' not in existing_tables:
        op.create_table(
            'members',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('name', sa.String(length=200), nullable=False),
            sa.Column('constituency', sa.String(length=200), nullable=False),
            sa.Column('session_name', sa.String(length=200), nullable=False),
            sa.Column('session_date', sa.DateTime(), nullable=False),
            sa.Column('speech_given', sa.Text(), nullable=False),
            sa.Column('time_taken', sa.Float(), nullable=False),
            sa.Column('party_name', sa.String(length=200), nullable=False, server_default=''),
            sa.Column('image_url', sa.String(length=500), nullable=False, server_default=''),
            sa.Column('party_logo_url', sa.String(length=500), nullable=False, server_default=''),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
            sa.CheckConstraint('time_taken >= 0', name='ck_members_time_taken_non_negative'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_members_id'), 'members', ['id'], unique=False)
        op.create_index(op.f('ix_members_session_name'), 'members', ['session_name'], unique=False)
        op.create_index(op.f('ix_members_session_date'), 'members', ['session_date'], unique=False)
        op.create_index(op.f('ix_members_created_at'), 'members', ['created_at'], unique=False)

    if 'admins' not in existing_tables:
        op.create_table(
            'admins',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('email', sa.String(length=255), nullable=False),
            sa.Column('password_hash', sa.String(length=255), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_admins_id'), 'admins', ['id'], unique=False)
        op.create_index(op.f('ix_admins_email'), 'admins', ['email'], unique=True)


def downgrade() -> None:
    """Drop the members and admins tables"""
    op.drop_index(op.f('ix_admins_email'), table_name='admins')
    op.drop_index(op.f('ix_admins_id'), table_name='admins')
    op.drop_table('admins')
    op.drop_index(op.f('ix_members_created_at'), table_name='members')
    op.drop_index(op.f('ix_members_session_date'), table_name='members')
    op.drop_index(op.f('ix_members_session_name'), table_name='members')
    op.drop_index(op.f('ix_members_id'), table_name='members')
    op.drop_table('members')
