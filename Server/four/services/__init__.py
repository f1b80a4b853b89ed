"""
Services Package

Contains all business logic and service classes.
"""

from .evaluator import evaluate
from .game_service import Game, GameService, GameSession, get_game_service, initialize_game_service
from .keyboard import aggregate
from .lexicon import Lexicon
from .notifications import NotificationCenter
from .scheduler import ManualScheduler, ScheduledTask, Scheduler, SocketIOScheduler

__all__ = [
    'evaluate', 'aggregate', 'Lexicon', 'NotificationCenter',
    'Game', 'GameService', 'GameSession', 'get_game_service', 'initialize_game_service',
    'ManualScheduler', 'ScheduledTask', 'Scheduler', 'SocketIOScheduler'
]
