"""Ghost battle resolution engine.

Sub-packages:
- core (logging, errors, type metadata, paths)
- data (read-only master data: moves, species, items)
- battle (type chart, damage, turn order, capture/escape, experience, state machine)
- system (settings)
"""
__version__ = "0.3.0"
