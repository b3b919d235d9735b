# folder_share/models/share_table.py
# Metadata rows for published folders; payloads live in the blob store

from sqlalchemy import Table, Column, Text, TIMESTAMP, Index, func

from folder_share.db.base import metadata


folders = Table(
    'folders',
    metadata,
    Column('id', Text, primary_key=True),  # share id handed to clients
    Column('hmac', Text, nullable=False),  # integrity code, dedup key (not unique)
    Column('name', Text, nullable=False),
    Column('expiration', TIMESTAMP(timezone=True), nullable=False),
    Column('created_at', TIMESTAMP(timezone=True), nullable=False, server_default=func.now()),
    Index('ix_folders_hmac_expiration', 'hmac', 'expiration'),
    Index('ix_folders_expiration', 'expiration'),
    schema='public',
)
