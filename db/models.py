from datetime import datetime, timezone
from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text, DateTime, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class Novel(Base):
    __tablename__ = "novels"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True, default="")
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    chapters = relationship("Chapter", back_populates="novel", cascade="all, delete-orphan", passive_deletes=True)
    characters = relationship("Character", back_populates="novel", cascade="all, delete-orphan", passive_deletes=True)
    places = relationship("Place", back_populates="novel", cascade="all, delete-orphan", passive_deletes=True)
    events = relationship("Event", back_populates="novel", cascade="all, delete-orphan", passive_deletes=True)
    lore = relationship("Lore", back_populates="novel", cascade="all, delete-orphan", passive_deletes=True)
    items = relationship("Item", back_populates="novel", cascade="all, delete-orphan", passive_deletes=True)
    notes = relationship("Note", back_populates="novel", cascade="all, delete-orphan", passive_deletes=True)
    ai_prompts = relationship("AIPrompt", back_populates="novel", cascade="all, delete-orphan", passive_deletes=True)
    outlines = relationship("Outline", back_populates="novel", cascade="all, delete-orphan", passive_deletes=True)

class Chapter(Base):
    __tablename__ = "chapters"

    id = Column(Integer, primary_key=True, autoincrement=True)
    novel_id = Column(Integer, ForeignKey("novels.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=True, default="")
    order_index = Column(Integer, nullable=False, default=0)
    word_count = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    novel = relationship("Novel", back_populates="chapters")
    versions = relationship("ChapterVersion", back_populates="chapter", cascade="all, delete-orphan", passive_deletes=True)

class ChapterVersion(Base):
    __tablename__ = "chapter_versions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    chapter_id = Column(Integer, ForeignKey("chapters.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=True)
    word_count = Column(Integer, default=0)
    version_note = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    chapter = relationship("Chapter", back_populates="versions")

class Character(Base):
    __tablename__ = "characters"
    __table_args__ = (UniqueConstraint("novel_id", "name", name="uq_characters_novel_name"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    novel_id = Column(Integer, ForeignKey("novels.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True, default="")
    traits = Column(Text, nullable=True, default="")
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    novel = relationship("Novel", back_populates="characters")

class Place(Base):
    __tablename__ = "places"
    __table_args__ = (UniqueConstraint("novel_id", "name", name="uq_places_novel_name"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    novel_id = Column(Integer, ForeignKey("novels.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True, default="")
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    novel = relationship("Novel", back_populates="places")

class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    novel_id = Column(Integer, ForeignKey("novels.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True, default="")
    chapter_id = Column(Integer, ForeignKey("chapters.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    novel = relationship("Novel", back_populates="events")

class Lore(Base):
    __tablename__ = "lore"

    id = Column(Integer, primary_key=True, autoincrement=True)
    novel_id = Column(Integer, ForeignKey("novels.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=True, default="")
    category = Column(String, nullable=True, default="")
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    novel = relationship("Novel", back_populates="lore")

class Item(Base):
    __tablename__ = "items"
    __table_args__ = (UniqueConstraint("novel_id", "name", name="uq_items_novel_name"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    novel_id = Column(Integer, ForeignKey("novels.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True, default="")
    properties = Column(Text, nullable=True, default="")
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    novel = relationship("Novel", back_populates="items")

class Note(Base):
    __tablename__ = "notes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    novel_id = Column(Integer, ForeignKey("novels.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=True, default="")
    category = Column(String, nullable=True, default="")
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    novel = relationship("Novel", back_populates="notes")

class AIPrompt(Base):
    __tablename__ = "ai_prompts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    novel_id = Column(Integer, ForeignKey("novels.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False)
    prompt_text = Column(Text, nullable=False)
    is_active = Column(Boolean, default=True)
    is_system = Column(Boolean, default=False)
    priority = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    novel = relationship("Novel", back_populates="ai_prompts")
    contexts = relationship("AIPromptContext", back_populates="prompt", cascade="all, delete-orphan", passive_deletes=True)

class AIPromptContext(Base):
    __tablename__ = "ai_prompt_contexts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    prompt_id = Column(Integer, ForeignKey("ai_prompts.id", ondelete="CASCADE"), nullable=False, index=True)
    # 'character', 'chapter' or 'global'
    context_type = Column(String, nullable=True)
    # character_id or chapter_id, null for global
    context_id = Column(Integer, nullable=True)

    prompt = relationship("AIPrompt", back_populates="contexts")

class Outline(Base):
    __tablename__ = "outlines"

    id = Column(Integer, primary_key=True, autoincrement=True)
    novel_id = Column(Integer, ForeignKey("novels.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True, default="")
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    novel = relationship("Novel", back_populates="outlines")
    sections = relationship("OutlineSection", back_populates="outline", cascade="all, delete-orphan", passive_deletes=True)

class OutlineSection(Base):
    __tablename__ = "outline_sections"
    __table_args__ = (Index("idx_outline_sections_parent_id", "parent_id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    outline_id = Column(Integer, ForeignKey("outlines.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True, default="")
    content = Column(Text, nullable=True, default="")
    order_index = Column(Integer, nullable=False, default=0)
    parent_id = Column(Integer, ForeignKey("outline_sections.id", ondelete="CASCADE"), nullable=True)
    level = Column(Integer, nullable=False, default=0)
    chapter_id = Column(Integer, ForeignKey("chapters.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    outline = relationship("Outline", back_populates="sections")
