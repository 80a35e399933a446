"""
Games module - Ready-made boards, pieces and armies.

Each game has its own subpackage with:
- Board definition
- Unit definitions
- Default army and match setup helpers
"""
