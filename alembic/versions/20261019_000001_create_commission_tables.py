"""Create commission engine tables

Revision ID: 20261019_000001
Revises: 
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '20261019_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # Tenants
    op.create_table(
        'tenants',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('slug', sa.String(100), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_tenants_slug', 'tenants', ['slug'], unique=True)

    # Partner tiers
    op.create_table(
        'partner_tiers',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('tenant_id', sa.Uuid(), nullable=False),
        sa.Column('code', sa.String(50), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('level_order', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('min_commission_rate', sa.DECIMAL(5, 4), nullable=False, server_default='0'),
        sa.Column('default_commission_rate', sa.DECIMAL(5, 4), nullable=False, server_default='0'),
        sa.Column('max_commission_rate', sa.DECIMAL(5, 4), nullable=False, server_default='0'),
        sa.Column('max_referral_depth', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('tenant_id', 'code', name='uq_partner_tier_code_per_tenant'),
        sa.UniqueConstraint('tenant_id', 'level_order', name='uq_partner_tier_order_per_tenant'),
        sa.UniqueConstraint('tenant_id', 'id', name='uq_partner_tier_tenant_id'),
        sa.CheckConstraint(
            'min_commission_rate >= 0 AND min_commission_rate <= 1 AND '
            'default_commission_rate >= 0 AND default_commission_rate <= 1 AND '
            'max_commission_rate >= 0 AND max_commission_rate <= 1',
            name='check_partner_tier_rates_range',
        ),
        sa.CheckConstraint(
            'min_commission_rate <= default_commission_rate AND '
            'default_commission_rate <= max_commission_rate',
            name='check_partner_tier_rates_order',
        ),
        sa.CheckConstraint('max_referral_depth >= 1', name='check_partner_tier_depth_positive'),
        sa.CheckConstraint('level_order > 0', name='check_partner_tier_order_positive'),
        sa.CheckConstraint(
            "status IN ('active', 'inactive', 'archived')",
            name='check_partner_tier_status',
        ),
    )
    op.create_index('ix_partner_tiers_tenant_id', 'partner_tiers', ['tenant_id'])
    op.create_index('idx_partner_tiers_tenant_status', 'partner_tiers', ['tenant_id', 'status'])

    # Partners
    op.create_table(
        'partners',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('tenant_id', sa.Uuid(), nullable=False),
        sa.Column('code', sa.String(50), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('display_name', sa.String(200), nullable=True),
        sa.Column('tier_id', sa.Uuid(), nullable=False),
        sa.Column('sponsor_id', sa.Uuid(), nullable=True),
        sa.Column('commission_rate', sa.DECIMAL(5, 4), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('enrolled_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('tenant_id', 'code', name='uq_partner_code_per_tenant'),
        sa.UniqueConstraint('tenant_id', 'id', name='uq_partner_tenant_id'),
        sa.ForeignKeyConstraint(
            ['tenant_id', 'tier_id'],
            ['partner_tiers.tenant_id', 'partner_tiers.id'],
            name='fk_partners_tier_same_tenant',
            ondelete='RESTRICT',
        ),
        sa.ForeignKeyConstraint(
            ['tenant_id', 'sponsor_id'],
            ['partners.tenant_id', 'partners.id'],
            name='fk_partners_sponsor_same_tenant',
        ),
        sa.CheckConstraint(
            'sponsor_id IS NULL OR sponsor_id != id',
            name='check_partner_no_self_sponsorship',
        ),
        sa.CheckConstraint(
            'commission_rate IS NULL OR (commission_rate >= 0 AND commission_rate <= 1)',
            name='check_partner_commission_rate_range',
        ),
        sa.CheckConstraint(
            "status IN ('active', 'inactive', 'suspended', 'terminated')",
            name='check_partner_status',
        ),
    )
    op.create_index('ix_partners_tenant_id', 'partners', ['tenant_id'])
    op.create_index('idx_partners_tenant_sponsor', 'partners', ['tenant_id', 'sponsor_id'])
    op.create_index('idx_partners_tenant_status', 'partners', ['tenant_id', 'status'])

    # Partner relations
    op.create_table(
        'partner_relations',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('tenant_id', sa.Uuid(), nullable=False),
        sa.Column('parent_partner_id', sa.Uuid(), nullable=False),
        sa.Column('child_partner_id', sa.Uuid(), nullable=False),
        sa.Column('depth', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('path', sa.String(1000), nullable=True),
        sa.Column('relationship_type', sa.String(20), nullable=False, server_default='sponsorship'),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('established_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('severed_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ondelete='CASCADE'),
        sa.UniqueConstraint(
            'tenant_id', 'parent_partner_id', 'child_partner_id', 'relationship_type',
            name='uq_partner_relation_edge',
        ),
        sa.ForeignKeyConstraint(
            ['tenant_id', 'parent_partner_id'],
            ['partners.tenant_id', 'partners.id'],
            name='fk_partner_relations_parent_same_tenant',
            ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['tenant_id', 'child_partner_id'],
            ['partners.tenant_id', 'partners.id'],
            name='fk_partner_relations_child_same_tenant',
            ondelete='CASCADE',
        ),
        sa.CheckConstraint('parent_partner_id != child_partner_id', name='check_partner_relation_no_self'),
        sa.CheckConstraint('depth >= 1', name='check_partner_relation_depth_positive'),
        sa.CheckConstraint(
            "relationship_type IN ('sponsorship', 'mentorship', 'team')",
            name='check_partner_relation_type',
        ),
        sa.CheckConstraint(
            "status IN ('active', 'inactive', 'severed')",
            name='check_partner_relation_status',
        ),
    )
    op.create_index('ix_partner_relations_tenant_id', 'partner_relations', ['tenant_id'])
    op.create_index(
        'idx_partner_relations_child', 'partner_relations',
        ['tenant_id', 'child_partner_id', 'status'],
    )
    op.create_index(
        'idx_partner_relations_parent', 'partner_relations',
        ['tenant_id', 'parent_partner_id'],
    )

    # Partner commissions (the ledger)
    op.create_table(
        'partner_commissions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('tenant_id', sa.Uuid(), nullable=False),
        sa.Column('transaction_id', sa.String(255), nullable=False),
        sa.Column('transaction_amount', sa.DECIMAL(18, 8), nullable=False),
        sa.Column('currency', sa.String(10), nullable=False, server_default='USD'),
        sa.Column('transaction_type', sa.String(20), nullable=False, server_default='payment'),
        sa.Column('beneficiary_partner_id', sa.Uuid(), nullable=False),
        sa.Column('beneficiary_partner_code', sa.String(50), nullable=False),
        sa.Column('source_partner_id', sa.Uuid(), nullable=False),
        sa.Column('source_partner_code', sa.String(50), nullable=False),
        sa.Column('commission_level', sa.Integer(), nullable=False),
        sa.Column('levels_from_source', sa.Integer(), nullable=False),
        sa.Column('commission_percentage', sa.DECIMAL(5, 4), nullable=False),
        sa.Column('commission_amount', sa.DECIMAL(15, 2), nullable=False),
        sa.Column('tier_id', sa.Uuid(), nullable=True),
        sa.Column('tier_name', sa.String(100), nullable=True),
        sa.Column('tier_rate', sa.DECIMAL(5, 4), nullable=True),
        sa.Column('tier_max_depth', sa.Integer(), nullable=True),
        sa.Column('calculation_status', sa.String(20), nullable=False, server_default='calculated'),
        sa.Column('payout_status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('transaction_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('calculation_date', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('approved_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('paid_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('commission_engine_version', sa.String(20), nullable=False, server_default='1.0'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column(
            'metadata',
            sa.JSON().with_variant(postgresql.JSONB(), 'postgresql'),
            nullable=True,
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ondelete='RESTRICT'),
        sa.UniqueConstraint(
            'tenant_id', 'transaction_id', 'beneficiary_partner_id', 'levels_from_source',
            name='uq_partner_commission_idempotency',
        ),
        sa.ForeignKeyConstraint(
            ['tenant_id', 'beneficiary_partner_id'],
            ['partners.tenant_id', 'partners.id'],
            name='fk_partner_commissions_beneficiary_same_tenant',
            ondelete='RESTRICT',
        ),
        sa.ForeignKeyConstraint(
            ['tenant_id', 'source_partner_id'],
            ['partners.tenant_id', 'partners.id'],
            name='fk_partner_commissions_source_same_tenant',
            ondelete='RESTRICT',
        ),
        sa.CheckConstraint('transaction_amount > 0', name='check_partner_commission_transaction_amount_positive'),
        sa.CheckConstraint('commission_amount >= 0', name='check_partner_commission_amount_non_negative'),
        sa.CheckConstraint(
            'commission_percentage >= 0 AND commission_percentage <= 1',
            name='check_partner_commission_rate_range',
        ),
        sa.CheckConstraint(
            'levels_from_source >= 1 AND commission_level >= 1',
            name='check_partner_commission_levels_positive',
        ),
        sa.CheckConstraint(
            'beneficiary_partner_id != source_partner_id',
            name='check_partner_commission_not_self',
        ),
        sa.CheckConstraint(
            "transaction_type IN ('payment', 'signup', 'recurring', 'bonus')",
            name='check_partner_commission_transaction_type',
        ),
        sa.CheckConstraint(
            "calculation_status IN ('calculated', 'approved', 'paid', 'cancelled', 'disputed')",
            name='check_partner_commission_calculation_status',
        ),
        sa.CheckConstraint(
            "payout_status IN ('pending', 'processing', 'paid', 'failed', 'cancelled')",
            name='check_partner_commission_payout_status',
        ),
    )
    op.create_index('ix_partner_commissions_tenant_id', 'partner_commissions', ['tenant_id'])
    op.create_index(
        'idx_partner_commissions_beneficiary', 'partner_commissions',
        ['tenant_id', 'beneficiary_partner_id', 'transaction_date'],
    )
    op.create_index(
        'idx_partner_commissions_transaction', 'partner_commissions',
        ['tenant_id', 'transaction_id'],
    )
    op.create_index(
        'idx_partner_commissions_payout_status', 'partner_commissions',
        ['tenant_id', 'payout_status'],
    )


def downgrade() -> None:
    op.drop_index('idx_partner_commissions_payout_status', 'partner_commissions')
    op.drop_index('idx_partner_commissions_transaction', 'partner_commissions')
    op.drop_index('idx_partner_commissions_beneficiary', 'partner_commissions')
    op.drop_index('ix_partner_commissions_tenant_id', 'partner_commissions')
    op.drop_table('partner_commissions')

    op.drop_index('idx_partner_relations_parent', 'partner_relations')
    op.drop_index('idx_partner_relations_child', 'partner_relations')
    op.drop_index('ix_partner_relations_tenant_id', 'partner_relations')
    op.drop_table('partner_relations')

    op.drop_index('idx_partners_tenant_status', 'partners')
    op.drop_index('idx_partners_tenant_sponsor', 'partners')
    op.drop_index('ix_partners_tenant_id', 'partners')
    op.drop_table('partners')

    op.drop_index('idx_partner_tiers_tenant_status', 'partner_tiers')
    op.drop_index('ix_partner_tiers_tenant_id', 'partner_tiers')
    op.drop_table('partner_tiers')

    op.drop_index('ix_tenants_slug', 'tenants')
    op.drop_table('tenants')
