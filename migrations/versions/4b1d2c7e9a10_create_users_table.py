"""create_users_table

Revision ID: 4b1d2c7e9a10
Revises:
Create Date: 2026-10-19 09:12:44.118203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '4b1d2c7e9a10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the users table and the indexes backing search."""
    op.create_table('users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('keycloak_id', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=255), nullable=True),
        sa.Column('last_name', sa.String(length=255), nullable=True),
        sa.Column('era_commons_id', sa.String(length=255), nullable=True),
        sa.Column('nih_ned_id', sa.String(length=255), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('public_email', sa.String(length=255), nullable=True),
        sa.Column('external_individual_fullname', sa.String(length=255), nullable=True),
        sa.Column('external_individual_email', sa.String(length=255), nullable=True),
        sa.Column('roles', postgresql.JSONB(), server_default='[]', nullable=False),
        sa.Column('affiliation', sa.String(length=255), nullable=True),
        sa.Column('portal_usages', postgresql.JSONB(), server_default='[]', nullable=False),
        sa.Column('research_area', sa.Text(), nullable=True),
        sa.Column('commercial_use_reason', sa.Text(), nullable=True),
        sa.Column('linkedin', sa.String(length=255), nullable=True),
        sa.Column('profile_image_key', sa.String(length=255), nullable=True),
        sa.Column('consent_date', sa.DateTime(), nullable=True),
        sa.Column('understand_disclaimer', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('accepted_terms', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('completed_registration', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('deleted', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('creation_date', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_date', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('keycloak_id'),
    )
    op.create_index('ix_users_completed_registration', 'users', ['completed_registration'], unique=False)
    op.create_index('ix_users_deleted', 'users', ['deleted'], unique=False)

    # GIN indexes serve the @> / <@ containment filters used by search
    op.create_index('ix_users_roles', 'users', ['roles'], unique=False, postgresql_using='gin')
    op.create_index(
        'ix_users_portal_usages', 'users', ['portal_usages'], unique=False, postgresql_using='gin'
    )


def downgrade() -> None:
    """Drop the users table."""
    op.drop_index('ix_users_portal_usages', table_name='users')
    op.drop_index('ix_users_roles', table_name='users')
    op.drop_index('ix_users_deleted', table_name='users')
    op.drop_index('ix_users_completed_registration', table_name='users')
    op.drop_table('users')
