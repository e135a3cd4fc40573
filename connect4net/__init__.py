"""
connect4net - Connect Four for one terminal or two machines

This package provides the Connect Four board engine, a one-byte-per-move
network protocol that keeps two players' boards in step, a random
self-play generator and a small policy-gradient bot.
"""

__version__ = '0.1.0'
