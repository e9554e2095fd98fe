"""
GameFrame - team, game and key moment feedback service.
"""

__version__ = "1.0.0"
