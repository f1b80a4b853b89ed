"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .game import (
    EvaluationRow,
    GameOutcome,
    GameStateView,
    GuessResult,
    KeyboardStatusMap,
    LetterStatus,
    Notification,
    NotificationType,
    RejectionReason,
    Row,
)

__all__ = [
    'EvaluationRow', 'GameOutcome', 'GameStateView', 'GuessResult', 'KeyboardStatusMap',
    'LetterStatus', 'Notification', 'NotificationType', 'RejectionReason', 'Row'
]
