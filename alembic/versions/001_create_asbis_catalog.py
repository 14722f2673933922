"""Create catalog tables with Asbis vendor keys

Revision ID: 001
Revises:
Create Date: 2026-10-19

Vendor keys (asbis_id / asbis_key) are indexed but not unique: duplicated
keys are reported by the integrity check rather than rejected on insert.
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('asbis_id', sa.String(length=500), nullable=True),
        sa.Column('asbis_code', sa.String(length=500), nullable=True),
        sa.Column('category_path', sa.String(length=1000), nullable=True),
        sa.Column('name_bg', sa.String(length=255), nullable=False),
        sa.Column('name_en', sa.String(length=255), nullable=True),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('show', sa.Boolean(), nullable=True),
        sa.Column('sort_order', sa.Integer(), nullable=True),
        sa.Column('parent_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['parent_id'], ['categories.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_categories_id', 'categories', ['id'])
    op.create_index('ix_categories_asbis_id', 'categories', ['asbis_id'])
    op.create_index('ix_categories_slug', 'categories', ['slug'], unique=True)

    op.create_table(
        'manufacturers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('asbis_id', sa.String(length=255), nullable=True),
        sa.Column('asbis_code', sa.String(length=255), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('information_name', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_manufacturers_id', 'manufacturers', ['id'])
    op.create_index('ix_manufacturers_asbis_id', 'manufacturers', ['asbis_id'])
    op.create_index('ix_manufacturers_name', 'manufacturers', ['name'])

    op.create_table(
        'parameters',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('asbis_key', sa.String(length=500), nullable=True),
        sa.Column('category_id', sa.Integer(), nullable=True),
        sa.Column('name_bg', sa.String(length=500), nullable=False),
        sa.Column('name_en', sa.String(length=500), nullable=True),
        sa.Column('order', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_parameters_id', 'parameters', ['id'])
    op.create_index('ix_parameters_asbis_key', 'parameters', ['asbis_key'])

    op.create_table(
        'parameter_options',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('parameter_id', sa.Integer(), nullable=False),
        sa.Column('name_bg', sa.Text(), nullable=False),
        sa.Column('name_en', sa.Text(), nullable=True),
        sa.Column('order', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['parameter_id'], ['parameters.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_parameter_options_id', 'parameter_options', ['id'])
    op.create_index('ix_parameter_options_parameter_id', 'parameter_options', ['parameter_id'])

    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('sku', sa.String(length=255), nullable=True),
        sa.Column('asbis_id', sa.String(length=255), nullable=True),
        sa.Column('asbis_code', sa.String(length=255), nullable=True),
        sa.Column('asbis_part_number', sa.String(length=255), nullable=True),
        sa.Column('reference_number', sa.String(length=255), nullable=True),
        sa.Column('name_bg', sa.Text(), nullable=True),
        sa.Column('name_en', sa.Text(), nullable=True),
        sa.Column('model', sa.String(length=500), nullable=True),
        sa.Column('status', sa.String(length=50), nullable=True),
        sa.Column('show', sa.Boolean(), nullable=True),
        sa.Column('primary_image_url', sa.String(length=1000), nullable=True),
        sa.Column('additional_images', sa.JSON(), nullable=True),
        sa.Column('price_client', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('discount', sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column('manufacturer_id', sa.Integer(), nullable=True),
        sa.Column('category_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['manufacturer_id'], ['manufacturers.id']),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_products_id', 'products', ['id'])
    op.create_index('ix_products_sku', 'products', ['sku'])
    op.create_index('ix_products_asbis_id', 'products', ['asbis_id'])

    op.create_table(
        'product_parameters',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('parameter_id', sa.Integer(), nullable=False),
        sa.Column('option_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['product_id'], ['products.id']),
        sa.ForeignKeyConstraint(['parameter_id'], ['parameters.id']),
        sa.ForeignKeyConstraint(['option_id'], ['parameter_options.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('product_id', 'parameter_id', name='uq_product_parameter')
    )
    op.create_index('ix_product_parameters_id', 'product_parameters', ['id'])
    op.create_index('ix_product_parameters_product_id', 'product_parameters', ['product_id'])


def downgrade():
    op.drop_table('product_parameters')
    op.drop_table('products')
    op.drop_table('parameter_options')
    op.drop_table('parameters')
    op.drop_table('manufacturers')
    op.drop_table('categories')
