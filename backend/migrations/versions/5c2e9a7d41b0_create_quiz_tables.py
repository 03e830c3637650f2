"""create quiz and quiz_question tables

Revision ID: 5c2e9a7d41b0
Revises:
Create Date: 2026-10-18 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2e9a7d41b0'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'quiz' not in existing_tables:
        op.create_table(
            'quiz',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('title', sa.String(length=200), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint('id'),
        )
    if 'quiz_question' not in existing_tables:
        op.create_table(
            'quiz_question',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('quiz_id', sa.Integer(), nullable=False),
            sa.Column('position', sa.Integer(), nullable=False),
            sa.Column('prompt', sa.Text(), nullable=False),
            sa.Column('options', sa.Text(), nullable=False),
            sa.Column('correct_answer', sa.Text(), nullable=False),
            sa.ForeignKeyConstraint(['quiz_id'], ['quiz.id']),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index('ix_quiz_question_quiz_id', 'quiz_question', ['quiz_id'])


def downgrade():
    op.drop_index('ix_quiz_question_quiz_id', table_name='quiz_question')
    op.drop_table('quiz_question')
    op.drop_table('quiz')
