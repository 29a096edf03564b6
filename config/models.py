"""
SQLAlchemy ORM Models
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

class Recipient(Base):
    __tablename__ = 'recipients'

    recipient_id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    chat_id = Column(String, nullable=False, default='')
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    def to_dict(self):
        return {
            'id': self.recipient_id,
            'name': self.name,
            'chatId': self.chat_id,
            'active': bool(self.active),
        }
