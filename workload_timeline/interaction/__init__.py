"""Gesture handling."""

from .controller import GestureMode, Hit, HitKind, InteractionController

__all__ = ['GestureMode', 'Hit', 'HitKind', 'InteractionController']
