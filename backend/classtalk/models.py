from __future__ import annotations
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text
from .db import Base


class KVEntry(Base):
	__tablename__ = "kv_entries"
	# Namespaced key, e.g. "session:AB12-CD34"
	key = Column(String(256), primary_key=True, index=True)
	value = Column(Text, nullable=False)  # serialized JSON blob
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
