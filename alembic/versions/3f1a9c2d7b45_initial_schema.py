"""initial_schema

Revision ID: 3f1a9c2d7b45
Revises:
Create Date: 2026-10-19 10:12:41.517204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1a9c2d7b45'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
    ]


def _created_at():
    return sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True)


def upgrade() -> None:
    op.create_table('novels',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table('chapters',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('novel_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('order_index', sa.Integer(), nullable=False),
        sa.Column('word_count', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['novel_id'], ['novels.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_chapters_novel_id'), 'chapters', ['novel_id'], unique=False)
    op.create_table('chapter_versions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('chapter_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('word_count', sa.Integer(), nullable=True),
        sa.Column('version_note', sa.Text(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['chapter_id'], ['chapters.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_chapter_versions_chapter_id'), 'chapter_versions', ['chapter_id'], unique=False)
    op.create_table('characters',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('novel_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('traits', sa.Text(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['novel_id'], ['novels.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('novel_id', 'name', name='uq_characters_novel_name')
    )
    op.create_index(op.f('ix_characters_novel_id'), 'characters', ['novel_id'], unique=False)
    op.create_table('places',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('novel_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['novel_id'], ['novels.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('novel_id', 'name', name='uq_places_novel_name')
    )
    op.create_index(op.f('ix_places_novel_id'), 'places', ['novel_id'], unique=False)
    op.create_table('events',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('novel_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('chapter_id', sa.Integer(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['novel_id'], ['novels.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['chapter_id'], ['chapters.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_events_novel_id'), 'events', ['novel_id'], unique=False)
    op.create_table('lore',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('novel_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('category', sa.String(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['novel_id'], ['novels.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_lore_novel_id'), 'lore', ['novel_id'], unique=False)
    op.create_table('items',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('novel_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('properties', sa.Text(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['novel_id'], ['novels.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('novel_id', 'name', name='uq_items_novel_name')
    )
    op.create_index(op.f('ix_items_novel_id'), 'items', ['novel_id'], unique=False)
    op.create_table('notes',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('novel_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('category', sa.String(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['novel_id'], ['novels.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_notes_novel_id'), 'notes', ['novel_id'], unique=False)
    op.create_table('ai_prompts',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('novel_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('prompt_text', sa.Text(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('is_system', sa.Boolean(), nullable=True),
        sa.Column('priority', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['novel_id'], ['novels.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_ai_prompts_novel_id'), 'ai_prompts', ['novel_id'], unique=False)
    op.create_table('ai_prompt_contexts',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('prompt_id', sa.Integer(), nullable=False),
        sa.Column('context_type', sa.String(), nullable=True),
        sa.Column('context_id', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['prompt_id'], ['ai_prompts.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_ai_prompt_contexts_prompt_id'), 'ai_prompt_contexts', ['prompt_id'], unique=False)
    op.create_table('outlines',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('novel_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['novel_id'], ['novels.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_outlines_novel_id'), 'outlines', ['novel_id'], unique=False)
    op.create_table('outline_sections',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('outline_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('order_index', sa.Integer(), nullable=False),
        sa.Column('parent_id', sa.Integer(), nullable=True),
        sa.Column('level', sa.Integer(), nullable=False),
        sa.Column('chapter_id', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['outline_id'], ['outlines.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['parent_id'], ['outline_sections.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['chapter_id'], ['chapters.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_outline_sections_outline_id'), 'outline_sections', ['outline_id'], unique=False)
    op.create_index('idx_outline_sections_parent_id', 'outline_sections', ['parent_id'], unique=False)


def downgrade() -> None:
    op.drop_index('idx_outline_sections_parent_id', table_name='outline_sections')
    op.drop_index(op.f('ix_outline_sections_outline_id'), table_name='outline_sections')
    op.drop_table('outline_sections')
    op.drop_index(op.f('ix_outlines_novel_id'), table_name='outlines')
    op.drop_table('outlines')
    op.drop_index(op.f('ix_ai_prompt_contexts_prompt_id'), table_name='ai_prompt_contexts')
    op.drop_table('ai_prompt_contexts')
    op.drop_index(op.f('ix_ai_prompts_novel_id'), table_name='ai_prompts')
    op.drop_table('ai_prompts')
    op.drop_index(op.f('ix_notes_novel_id'), table_name='notes')
    op.drop_table('notes')
    op.drop_index(op.f('ix_items_novel_id'), table_name='items')
    op.drop_table('items')
    op.drop_index(op.f('ix_lore_novel_id'), table_name='lore')
    op.drop_table('lore')
    op.drop_index(op.f('ix_events_novel_id'), table_name='events')
    op.drop_table('events')
    op.drop_index(op.f('ix_places_novel_id'), table_name='places')
    op.drop_table('places')
    op.drop_index(op.f('ix_characters_novel_id'), table_name='characters')
    op.drop_table('characters')
    op.drop_index(op.f('ix_chapter_versions_chapter_id'), table_name='chapter_versions')
    op.drop_table('chapter_versions')
    op.drop_index(op.f('ix_chapters_novel_id'), table_name='chapters')
    op.drop_table('chapters')
    op.drop_table('novels')
