"""Runtime package.

Keep this module dependency-light: settings and logging helpers must import
without opening a connection to the middleware.
"""

__all__: list[str] = []
