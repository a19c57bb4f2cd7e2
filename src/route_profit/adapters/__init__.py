"""
Adapter implementations for Route Profit.

Adapters are concrete implementations of the port interfaces.
They handle the specifics of the game backend, throttling, fleet
matching and persisted account state.
"""
