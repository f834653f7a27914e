"""
Association tables for many-to-many relationships.
Kept separate to avoid circular imports between models.
"""
from sqlalchemy import Column, Integer, Table, ForeignKey, DateTime, UniqueConstraint, func
from grocery_api.models.base import Base

item_tags_master = Table(
    'item_tags_master',
    Base.metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('item_id', Integer, ForeignKey('master_list_items.id', ondelete='CASCADE'), nullable=False, index=True),
    Column('tag_id', Integer, ForeignKey('tags.id', ondelete='CASCADE'), nullable=False, index=True),
    Column('created_at', DateTime(timezone=True), server_default=func.now(), nullable=False),
    UniqueConstraint('item_id', 'tag_id', name='uq_item_tags_master_item_tag'),
)
