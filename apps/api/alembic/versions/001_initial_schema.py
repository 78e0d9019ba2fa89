"""Initial schema: assets, evidence, verification requests, service records.

Revision ID: 001
Revises: 
Create Date: 2024-01-01
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'assets',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('asset_id', sa.BigInteger(), nullable=False),
        sa.Column('data_hash', sa.String(length=66), nullable=False),
        sa.Column('manufacturer', sa.String(length=255), nullable=False),
        sa.Column('model', sa.String(length=255), nullable=False),
        sa.Column('serial_number', sa.String(length=255), nullable=False),
        sa.Column('manufactured_date', sa.String(length=10), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('images', sa.JSON(), nullable=True),
        sa.Column('metadata_json', sa.JSON(), nullable=True),
        sa.Column('mint_status', sa.String(length=20), nullable=False, server_default='PENDING'),
        sa.Column('tx_hash', sa.String(length=66), nullable=True),
        sa.Column('created_by', sa.String(length=42), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('minted_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_assets_id', 'assets', ['id'])
    op.create_index('ix_assets_asset_id', 'assets', ['asset_id'], unique=True)
    op.create_index('ix_assets_data_hash', 'assets', ['data_hash'], unique=True)
    op.create_index('ix_assets_mint_status', 'assets', ['mint_status'])
    op.create_index('ix_assets_created_by', 'assets', ['created_by'])

    op.create_table(
        'evidence',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('asset_id', sa.BigInteger(), sa.ForeignKey('assets.asset_id', ondelete='CASCADE'), nullable=False),
        sa.Column('data_hash', sa.String(length=66), nullable=False),
        sa.Column('event_type', sa.String(length=20), nullable=False),
        sa.Column('event_date', sa.String(length=10), nullable=True),
        sa.Column('provider_id', sa.String(length=255), nullable=True),
        sa.Column('provider_name', sa.String(length=255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('files', sa.JSON(), nullable=True),
        sa.Column('metadata_json', sa.JSON(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='PENDING'),
        sa.Column('is_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('verified_by', sa.String(length=42), nullable=True),
        sa.Column('blockchain_event_id', sa.BigInteger(), nullable=True),
        sa.Column('tx_hash', sa.String(length=66), nullable=True),
        sa.Column('created_by', sa.String(length=42), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('confirmed_at', sa.DateTime(), nullable=True),
        sa.Column('verified_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_evidence_id', 'evidence', ['id'])
    op.create_index('ix_evidence_asset_id', 'evidence', ['asset_id'])
    op.create_index('ix_evidence_data_hash', 'evidence', ['data_hash'], unique=True)
    op.create_index('ix_evidence_status', 'evidence', ['status'])

    op.create_table(
        'verification_requests',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('request_id', sa.String(length=50), nullable=False),
        sa.Column('asset_id', sa.BigInteger(), sa.ForeignKey('assets.asset_id', ondelete='RESTRICT'), nullable=False),
        sa.Column('request_type', sa.String(length=50), nullable=False),
        sa.Column('provider_id', sa.String(length=255), nullable=True),
        sa.Column('requested_by', sa.String(length=42), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='PENDING'),
        sa.Column('blockchain_event_id', sa.BigInteger(), nullable=True),
        sa.Column('tx_hash', sa.String(length=66), nullable=True),
        sa.Column('data_hash', sa.String(length=66), nullable=True),
        sa.Column('evidence_id', sa.Integer(), nullable=True),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('claimed_at', sa.DateTime(), nullable=True),
        sa.Column('processed_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_verification_requests_id', 'verification_requests', ['id'])
    op.create_index('ix_verification_requests_request_id', 'verification_requests', ['request_id'], unique=True)
    op.create_index('ix_verification_requests_asset_id', 'verification_requests', ['asset_id'])
    op.create_index('ix_verification_requests_status', 'verification_requests', ['status'])
    op.create_index('ix_verification_requests_evidence_id', 'verification_requests', ['evidence_id'])
    op.create_index('ix_verification_requests_created_at', 'verification_requests', ['created_at'])

    op.create_table(
        'service_providers',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('provider_id', sa.String(length=255), nullable=False, unique=True),
        sa.Column('provider_name', sa.String(length=255), nullable=False),
        sa.Column('provider_type', sa.String(length=50), nullable=False),
        sa.Column('is_trusted', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_service_providers_id', 'service_providers', ['id'])

    op.create_table(
        'service_records',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('record_id', sa.String(length=255), nullable=False, unique=True),
        sa.Column('asset_id', sa.BigInteger(), sa.ForeignKey('assets.asset_id', ondelete='CASCADE'), nullable=False),
        sa.Column('provider_id', sa.String(length=255), nullable=False),
        sa.Column('service_type', sa.String(length=50), nullable=False),
        sa.Column('service_date', sa.String(length=10), nullable=False),
        sa.Column('technician', sa.String(length=255), nullable=True),
        sa.Column('work_performed', sa.JSON(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('verified', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_service_records_id', 'service_records', ['id'])
    op.create_index('ix_service_records_asset_id', 'service_records', ['asset_id'])


def downgrade() -> None:
    op.drop_table('service_records')
    op.drop_table('service_providers')
    op.drop_table('verification_requests')
    op.drop_table('evidence')
    op.drop_table('assets')
