"""Hotels app package.

Owns hotels and their rooms. The booking engine reads rooms through
the directory in ``directory.py`` and never writes to them.
"""
