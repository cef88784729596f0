"""
Battle resolution package.
Modules:
- models.py (snapshots, battle state, actions, turn results)
- typechart.py (attack type x defense type multipliers)
- damage.py (damage calc, crits, STAB, stat stages)
- turn_order.py (speed arbitration)
- capture.py (capture & escape rolls)
- experience.py (exp curve, level-ups, stat recompute, move learning)
- ai.py (opponent move selection policies)
- state_machine.py (one encounter, start to finish)
- sync.py (post-battle party update)
- factory.py (owned ghosts from species data)
- render.py (rich HUD for tooling)
"""
