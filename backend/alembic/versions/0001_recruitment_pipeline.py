"""Create recruitment pipeline tables

Revision ID: 0001_recruitment_pipeline
Revises: 
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_recruitment_pipeline'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    
    op.create_table(
        'recruitment_openings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('company_name', sa.String(length=255), nullable=False),
        sa.Column('role_title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('application_deadline', sa.DateTime(), nullable=False),
        sa.Column('total_positions', sa.Integer(), nullable=False),
        sa.Column('min_cgpa', sa.Float(), nullable=True),
        sa.Column('max_backlogs', sa.Integer(), nullable=True),
        sa.Column('eligible_branches', sa.JSON(), nullable=True),
        sa.Column('passing_year', sa.Integer(), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('total_positions >= 1', name='ck_opening_positions_positive'),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_recruitment_openings_id'), 'recruitment_openings', ['id'], unique=False)
    op.create_index(op.f('ix_recruitment_openings_company_name'), 'recruitment_openings', ['company_name'], unique=False)
    op.create_index(op.f('ix_recruitment_openings_status'), 'recruitment_openings', ['status'], unique=False)
    
    op.create_table(
        'students',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('roll_number', sa.String(length=50), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('branch', sa.String(length=100), nullable=False),
        sa.Column('batch', sa.Integer(), nullable=False),
        sa.Column('cgpa', sa.Float(), nullable=True),
        sa.Column('backlogs', sa.Integer(), nullable=True),
        sa.Column('placed', sa.Boolean(), nullable=False),
        sa.Column('placed_opening_id', sa.Integer(), nullable=True),
        sa.Column('placed_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('backlogs >= 0', name='ck_student_backlogs_non_negative'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['placed_opening_id'], ['recruitment_openings.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
    )
    op.create_index(op.f('ix_students_id'), 'students', ['id'], unique=False)
    op.create_index(op.f('ix_students_roll_number'), 'students', ['roll_number'], unique=True)
    op.create_index(op.f('ix_students_branch'), 'students', ['branch'], unique=False)
    op.create_index(op.f('ix_students_batch'), 'students', ['batch'], unique=False)
    op.create_index(op.f('ix_students_placed'), 'students', ['placed'], unique=False)
    
    op.create_table(
        'application_windows',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('opening_id', sa.Integer(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('min_cgpa', sa.Float(), nullable=True),
        sa.Column('max_backlogs', sa.Integer(), nullable=True),
        sa.Column('eligible_branches', sa.JSON(), nullable=True),
        sa.Column('passing_year', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_by', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['opening_id'], ['recruitment_openings.id'], ),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_application_windows_id'), 'application_windows', ['id'], unique=False)
    op.create_index(op.f('ix_application_windows_opening_id'), 'application_windows', ['opening_id'], unique=False)
    op.create_index(op.f('ix_application_windows_start_date'), 'application_windows', ['start_date'], unique=False)
    op.create_index(op.f('ix_application_windows_is_active'), 'application_windows', ['is_active'], unique=False)
    
    op.create_table(
        'recruitment_rounds',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('opening_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('round_number', sa.Integer(), nullable=False),
        sa.Column('scheduled_date', sa.DateTime(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('is_online', sa.Boolean(), nullable=True),
        sa.Column('meeting_link', sa.String(length=500), nullable=True),
        sa.Column('instructions', sa.Text(), nullable=True),
        sa.Column('max_candidates', sa.Integer(), nullable=True),
        sa.Column('current_candidates', sa.Integer(), nullable=False),
        sa.Column('created_by', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('current_candidates >= 0', name='ck_round_occupancy_non_negative'),
        sa.CheckConstraint(
            'max_candidates IS NULL OR current_candidates <= max_candidates',
            name='ck_round_occupancy_capacity',
        ),
        sa.ForeignKeyConstraint(['opening_id'], ['recruitment_openings.id'], ),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('opening_id', 'round_number', name='uq_round_opening_number'),
    )
    op.create_index(op.f('ix_recruitment_rounds_id'), 'recruitment_rounds', ['id'], unique=False)
    op.create_index(op.f('ix_recruitment_rounds_opening_id'), 'recruitment_rounds', ['opening_id'], unique=False)
    
    op.create_table(
        'applications',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('student_id', sa.Integer(), nullable=False),
        sa.Column('opening_id', sa.Integer(), nullable=False),
        sa.Column('current_round_id', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('score', sa.Float(), nullable=True),
        sa.Column('notes', sa.String(length=1000), nullable=True),
        sa.Column('form_data', sa.JSON(), nullable=True),
        sa.Column('resume_url', sa.String(length=500), nullable=True),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('reviewed_by', sa.Integer(), nullable=True),
        sa.CheckConstraint(
            'score IS NULL OR (score >= 0 AND score <= 100)',
            name='ck_application_score_range',
        ),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ),
        sa.ForeignKeyConstraint(['opening_id'], ['recruitment_openings.id'], ),
        sa.ForeignKeyConstraint(['current_round_id'], ['recruitment_rounds.id'], ),
        sa.ForeignKeyConstraint(['reviewed_by'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('student_id', 'opening_id', name='uq_application_student_opening'),
    )
    op.create_index(op.f('ix_applications_id'), 'applications', ['id'], unique=False)
    op.create_index(op.f('ix_applications_student_id'), 'applications', ['student_id'], unique=False)
    op.create_index(op.f('ix_applications_opening_id'), 'applications', ['opening_id'], unique=False)
    op.create_index(op.f('ix_applications_current_round_id'), 'applications', ['current_round_id'], unique=False)
    op.create_index(op.f('ix_applications_status'), 'applications', ['status'], unique=False)
    
    op.create_table(
        'application_review_history',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('application_id', sa.Integer(), nullable=False),
        sa.Column('reviewer_id', sa.Integer(), nullable=True),
        sa.Column('old_status', sa.String(length=20), nullable=True),
        sa.Column('new_status', sa.String(length=20), nullable=True),
        sa.Column('old_score', sa.Float(), nullable=True),
        sa.Column('new_score', sa.Float(), nullable=True),
        sa.Column('notes', sa.String(length=1000), nullable=True),
        sa.Column('review_type', sa.String(length=20), nullable=False),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['application_id'], ['applications.id'], ),
        sa.ForeignKeyConstraint(['reviewer_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_application_review_history_id'), 'application_review_history', ['id'], unique=False)
    op.create_index(op.f('ix_application_review_history_application_id'), 'application_review_history', ['application_id'], unique=False)
    op.create_index(op.f('ix_application_review_history_reviewer_id'), 'application_review_history', ['reviewer_id'], unique=False)
    op.create_index(op.f('ix_application_review_history_reviewed_at'), 'application_review_history', ['reviewed_at'], unique=False)
    
    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('student_id', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('payload', sa.JSON(), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_notifications_id'), 'notifications', ['id'], unique=False)
    op.create_index(op.f('ix_notifications_student_id'), 'notifications', ['student_id'], unique=False)


def downgrade():
    op.drop_table('notifications')
    op.drop_table('application_review_history')
    op.drop_table('applications')
    op.drop_table('recruitment_rounds')
    op.drop_table('application_windows')
    op.drop_table('students')
    op.drop_table('recruitment_openings')
    op.drop_table('users')
