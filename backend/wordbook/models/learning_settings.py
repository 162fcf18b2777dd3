from sqlalchemy import Column, Integer, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from wordbook.db.base_class import Base

class LearningSettings(Base):
    """Per-user study preferences: session sizes and enabled exercise types."""
    __tablename__ = "learning_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    learn_session_size = Column(Integer, nullable=False, default=10)
    review_session_size = Column(Integer, nullable=False, default=10)
    speed_review_session_size = Column(Integer, nullable=False, default=15)
    enable_typing = Column(Boolean, nullable=False, default=True)
    enable_tapping = Column(Boolean, nullable=False, default=True)
    enable_listening = Column(Boolean, nullable=False, default=True)

    user = relationship("User", back_populates="learning_settings")
