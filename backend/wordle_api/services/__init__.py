"""Domain services: word solver, room lifecycle, sync, lobby and stats.

HTTP routes and socket handlers import from here, keeping transport
concerns separate from game rules and persistence.
"""
