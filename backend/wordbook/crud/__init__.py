from .crud_catalog import language, level, chapter, word
from .crud_user import user, learning_settings
from .crud_progress import word_progress, user_stat
