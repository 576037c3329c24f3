"""users, fitness profiles, workout plans, workouts, exercises

Revision ID: 6b1f0c2a9d47
Revises:
Create Date: 2026-10-19 10:02:11.418305

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '6b1f0c2a9d47'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False, unique=True, index=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    )

    # one profile per user
    op.create_table(
        'fitness_profiles',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('user_id', sa.String(length=36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True, index=True),
        sa.Column('age', sa.Integer(), nullable=True),
        sa.Column('height', sa.Integer(), nullable=True),
        sa.Column('weight', sa.Integer(), nullable=True),
        sa.Column('gender', sa.String(length=32), nullable=True),
        sa.Column('fitness_level', sa.String(length=32), nullable=True),
        sa.Column('goals', sa.JSON(), nullable=True),
        sa.Column('target_areas', sa.JSON(), nullable=True),
        sa.Column('limitations', sa.JSON(), nullable=True),
        sa.Column('workout_duration', sa.Integer(), nullable=True),
        sa.Column('workout_frequency', sa.Integer(), nullable=True),
        sa.Column('preferred_time', sa.String(length=32), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    )

    # plan ids, workout ids and exercise ids are generated by the app, not the db
    op.create_table(
        'workout_plans',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('user_id', sa.String(length=36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    )

    op.create_table(
        'workouts',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('plan_id', sa.String(length=36), sa.ForeignKey('workout_plans.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('duration', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('level', sa.String(length=32), nullable=False, server_default='beginner'),
        sa.Column('exercise_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('calories_burn', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    )

    op.create_table(
        'exercises',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('workout_id', sa.String(length=36), sa.ForeignKey('workouts.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('sets', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('reps', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('duration', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('rest_time', sa.Integer(), nullable=False, server_default='0'),
    )


def downgrade() -> None:
    # drop child tables in reverse order
    op.drop_table('exercises')
    op.drop_table('workouts')
    op.drop_table('workout_plans')
    op.drop_table('fitness_profiles')
    op.drop_table('users')
