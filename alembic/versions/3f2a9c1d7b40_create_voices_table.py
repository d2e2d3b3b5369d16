"""create voices table

Revision ID: 3f2a9c1d7b40
Revises:
Create Date: 2025-09-02 10:14:27.301855

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f2a9c1d7b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'voices',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=True),
        sa.Column('gender', sa.Enum('male', 'female', 'neutral', name='voice_gender_enum'), nullable=True),
        sa.Column('language', sa.String(length=20), nullable=True),
        sa.Column('preview_url', sa.String(length=2048), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )
    op.create_index(op.f('ix_voices_language'), 'voices', ['language'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_voices_language'), table_name='voices')
    op.drop_table('voices')
    sa.Enum(name='voice_gender_enum').drop(op.get_bind(), checkfirst=True)
