"""
connect4net.interfaces - User-facing entry points for Connect Four

This package contains the command-line interface and the move sources
that supply local moves (terminal input, random play, trained bot).
"""

# Don't import the CLI here; it pulls in every other package
__all__ = []
