"""Binary IO utilities for save file parsing."""

from civsave.io.reader import Reader
from civsave.io.writer import Writer

__all__ = ['Reader', 'Writer']
