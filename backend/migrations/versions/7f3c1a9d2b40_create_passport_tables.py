"""create passport tables

Revision ID: 7f3c1a9d2b40
Revises:
Create Date: 2025-01-12 00:00:00.000000
"""
import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = '7f3c1a9d2b40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'passports',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('holder_id', sa.String(length=64), nullable=False),
        sa.Column('issuer_id', sa.String(length=64), nullable=False),
        sa.Column('issued_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('issued_by_id', sa.String(length=64), nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_passports')),
        sa.UniqueConstraint('holder_id', 'issuer_id', name='uq_passports_holder_issuer'),
    )
    op.create_index('ix_passports_holder_id', 'passports', ['holder_id'])
    op.create_index('ix_passports_issuer_id', 'passports', ['issuer_id'])

    op.create_table(
        'acceptance_policies',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('server_id', sa.String(length=64), nullable=False),
        sa.Column('issuer_id', sa.String(length=64), nullable=False),
        sa.Column('granted_role_id', sa.String(length=64), nullable=True),
        sa.Column('added_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('added_by_id', sa.String(length=64), nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_acceptance_policies')),
        sa.UniqueConstraint(
            'server_id', 'issuer_id', name='uq_acceptance_policies_server_issuer'
        ),
    )
    op.create_index('ix_acceptance_policies_server_id', 'acceptance_policies', ['server_id'])
    op.create_index('ix_acceptance_policies_issuer_id', 'acceptance_policies', ['issuer_id'])

    op.create_table(
        'auto_issue_rules',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('server_id', sa.String(length=64), nullable=False),
        sa.Column('trigger_role_id', sa.String(length=64), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_by_id', sa.String(length=64), nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_auto_issue_rules')),
        sa.UniqueConstraint(
            'server_id', 'trigger_role_id', name='uq_auto_issue_rules_server_role'
        ),
    )
    op.create_index('ix_auto_issue_rules_server_id', 'auto_issue_rules', ['server_id'])

    op.create_table(
        'delegated_tokens',
        sa.Column('holder_id', sa.String(length=64), nullable=False),
        sa.Column('access_token', sa.Text(), nullable=False),
        sa.Column('refresh_token', sa.Text(), nullable=True),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('holder_id', name=op.f('pk_delegated_tokens')),
    )


def downgrade():
    op.drop_table('delegated_tokens')
    op.drop_index('ix_auto_issue_rules_server_id', table_name='auto_issue_rules')
    op.drop_table('auto_issue_rules')
    op.drop_index('ix_acceptance_policies_issuer_id', table_name='acceptance_policies')
    op.drop_index('ix_acceptance_policies_server_id', table_name='acceptance_policies')
    op.drop_table('acceptance_policies')
    op.drop_index('ix_passports_issuer_id', table_name='passports')
    op.drop_index('ix_passports_holder_id', table_name='passports')
    op.drop_table('passports')
