"""
Wordbook

Vocabulary trainer backend: content catalog, study sessions and per-word progress.
"""

__version__ = "0.1.0"
