"""
Chaupar core Python package.

Pure turn analysis for the four-player cross-and-circle board game, plus the
thin persistence layer the HTTP service sits on.
Modules:
- topology.py, layout.py: BoardTopology, PlayerZones, TriggerMapping, standard board
- zones.py: zone classification and teleport lookups
- distance.py: path distance with Manhattan fallback
- state.py: GameSnapshot schema and JSON parsing
- diff.py, validate.py, narrate.py: the turn pipeline
- db.py, turns.py: SQLite storage and the request boundary
"""
