"""User profiles and identity accounts

Revision ID: 001
Revises:
Create Date: 2026-10-19 12:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Identity provider accounts
    op.create_table(
        'identity_accounts',
        sa.Column('uid', sa.String(128), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('custom_claims', sa.JSON(), nullable=False),
        sa.Column('disabled', sa.Boolean(), nullable=True, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('uid'),
    )
    op.create_index('ix_identity_accounts_email', 'identity_accounts', ['email'], unique=True)

    # Profiles managed by administrators
    op.create_table(
        'user_profiles',
        sa.Column('uid', sa.String(128), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('fb_name', sa.String(255), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('role', sa.String(20), nullable=False, server_default='user'),
        sa.Column('registration_date', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('uid'),
    )
    op.create_index('ix_user_profiles_email', 'user_profiles', ['email'])
    op.create_index('ix_user_profiles_status', 'user_profiles', ['status'])
    op.create_index('ix_user_profiles_role', 'user_profiles', ['role'])


def downgrade() -> None:
    op.drop_index('ix_user_profiles_role', table_name='user_profiles')
    op.drop_index('ix_user_profiles_status', table_name='user_profiles')
    op.drop_index('ix_user_profiles_email', table_name='user_profiles')
    op.drop_table('user_profiles')
    op.drop_index('ix_identity_accounts_email', table_name='identity_accounts')
    op.drop_table('identity_accounts')
