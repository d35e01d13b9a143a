"""
Ultimate - Ultimate Tic-Tac-Toe orchestrator.

Nine tic-tac-toe sub-games on a 3x3 meta board. The engine provides:
- The meta-game state machine (turns, required board, meta winner)
- A Board Service interface for the sub-games
- Sub-board adapters that guard against stale responses after a reset
- Ephemeral sessions, a REST API and a terminal CLI
"""

__version__ = "0.1.0"
