"""
Adaptive content delivery and progression engine for the dog trivia game.

Subpackages:
- content: content model, repository and LRU cache
- adaptive: difficulty selection and path relevance
- quiz: path question pools
- progression: checkpoints, rewards and game-over recovery
- core: errors, diagnostics, in-flight de-duplication, memory pressure
"""

__version__ = "1.0.0"
