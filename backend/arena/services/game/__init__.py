"""Game domain services: rooms, matchmaking, input and simulation.

This package holds the authoritative game state and the rules that mutate
it. Socket handlers call into these services and never touch room state
directly; transport concerns stay behind the connection registry.
"""
