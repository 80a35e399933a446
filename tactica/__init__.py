"""
Tactica - Graph Board Tactics Engine

A deterministic, turn-based rules engine that generalizes chess to
arbitrary graph-shaped boards. The engine provides:
- Board graph templates and mutable runtime topology
- Data-driven movement patterns
- Units with stats, levels and modifiers
- Move validation with check/checkmate/stalemate detection
- Match state with a single validated command surface
"""

__version__ = "0.1.0"
