"""
connect4net/ai/__init__.py - Policy-gradient bot for Connect Four

This package trains a small policy network against a random opponent and
uses it to pick moves. It depends on torch, so it is only imported by the
commands that need the bot.
"""

from connect4net.ai.policy import PolicyBot, PolicyModel, train

__all__ = ['PolicyBot', 'PolicyModel', 'train']
