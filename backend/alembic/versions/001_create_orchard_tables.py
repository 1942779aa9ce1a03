"""create orchard advisory tables

Revision ID: 001_create_orchard_tables
Revises:
Create Date: 2026-10-19
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = '001_create_orchard_tables'
down_revision: Union[str, Sequence[str], None] = None
branch_labels = None
depends_on = None

SOIL_COLUMNS = (
    'soil_ph', 'nitrogen', 'phosphorus', 'potassium', 'oc', 's', 'zn',
    'fe', 'mn', 'cu', 'b', 'ec', 'lime_requirement', 'gypsum_requirement',
)

WATER_COLUMNS = (
    'ph', 'ec', 'tds', 'hardness', 'na', 'ca', 'mg', 'sar', 'rsc', 'hco3',
    'co3', 'cl', 'so4', 'boron', 'no3_n', 'fe', 'f',
)


def upgrade() -> None:
    # --- Fields ---
    op.create_table(
        'fields',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_fields_user_id', 'fields', ['user_id'])

    # --- Soil lab results ---
    op.create_table(
        'soil_test_results',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('field_id', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('recorded_date', sa.Date(), nullable=False),
        *[sa.Column(name, sa.Float(), nullable=True) for name in SOIL_COLUMNS],
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['field_id'], ['fields.id']),
    )
    op.create_index('ix_soil_test_results_field_id', 'soil_test_results', ['field_id'])
    op.create_index('ix_soil_test_results_recorded_date', 'soil_test_results', ['recorded_date'])

    # --- Water lab results ---
    op.create_table(
        'water_test_results',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('field_id', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('test_date', sa.Date(), nullable=False),
        *[sa.Column(name, sa.Float(), nullable=True) for name in WATER_COLUMNS],
        sa.Column('report_url', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['field_id'], ['fields.id']),
    )
    op.create_index('ix_water_test_results_field_id', 'water_test_results', ['field_id'])
    op.create_index('ix_water_test_results_test_date', 'water_test_results', ['test_date'])

    # --- Analytics ---
    op.create_table(
        'field_analytics',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('field_id', sa.String(36), nullable=False),
        sa.Column('metric_type', sa.String(), nullable=False),
        sa.Column('metric_value', sa.Float(), nullable=True),
        sa.Column('recorded_date', sa.Date(), nullable=False),
        sa.ForeignKeyConstraint(['field_id'], ['fields.id']),
    )
    op.create_index('ix_field_analytics_field_id', 'field_analytics', ['field_id'])
    op.create_index('ix_field_analytics_metric_type', 'field_analytics', ['metric_type'])
    op.create_index('ix_field_analytics_recorded_date', 'field_analytics', ['recorded_date'])

    # --- Consultations ---
    op.create_table(
        'consultations',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('grower_name', sa.String(), nullable=False),
        sa.Column('grower_phone', sa.String(), nullable=False),
        sa.Column('field_id', sa.String(36), nullable=False),
        sa.Column('orchard_name', sa.String(), nullable=False),
        sa.Column('doctor_id', sa.String(36), nullable=True),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('target_datetime', sa.DateTime(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['field_id'], ['fields.id']),
    )
    op.create_index('ix_consultations_user_id', 'consultations', ['user_id'])
    op.create_index('ix_consultations_field_id', 'consultations', ['field_id'])

    # --- Prescriptions (one per consultation) ---
    op.create_table(
        'prescriptions',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('consultation_id', sa.String(36), nullable=False, unique=True),
        sa.Column('doctor_name', sa.String(), nullable=False),
        sa.Column('hospital_name', sa.String(), nullable=False),
        sa.Column('issue_diagnosed', sa.Text(), nullable=False),
        sa.Column('eppo_code', sa.String(), nullable=False),
        sa.Column('recommendation', sa.Text(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('issued_at', sa.DateTime(), nullable=True),
        sa.Column('follow_up_date', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['consultation_id'], ['consultations.id']),
    )

    # --- Prescription action items ---
    op.create_table(
        'prescription_action_items',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('prescription_id', sa.String(36), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('product_name', sa.String(), nullable=False),
        sa.Column('dosage', sa.String(), nullable=False),
        sa.Column('estimated_cost', sa.Float(), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['prescription_id'], ['prescriptions.id']),
    )


def downgrade() -> None:
    op.drop_table('prescription_action_items')
    op.drop_table('prescriptions')
    op.drop_index('ix_consultations_field_id', table_name='consultations')
    op.drop_index('ix_consultations_user_id', table_name='consultations')
    op.drop_table('consultations')
    op.drop_table('field_analytics')
    op.drop_table('water_test_results')
    op.drop_table('soil_test_results')
    op.drop_index('ix_fields_user_id', table_name='fields')
    op.drop_table('fields')
