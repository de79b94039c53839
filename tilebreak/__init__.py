"""
Tilebreak - Two-player "move, then break" board game engine.

Each turn a participant moves their token to an adjacent empty cell and
then breaks an empty cell. A participant left with no move loses.

The package provides:
- A deterministic board model, rule predicates and match state machine
- Turn coordination for two peers replaying each other's actions
- A local single-player controller with a pluggable opponent policy
- A hosted room API for clients relaying through a server
"""

__version__ = "0.1.0"
