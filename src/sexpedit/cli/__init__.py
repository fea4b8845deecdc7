"""
CLI Command Modules

Each module contains a logical group of related commands.
"""

from sexpedit.cli import edit, text

__all__ = ['edit', 'text']
