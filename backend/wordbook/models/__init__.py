# This file makes the 'models' directory a Python package.

from .catalog import Language, Level, Chapter, Word
from .user import User
from .progress import WordProgress, UserStat
from .learning_settings import LearningSettings
