"""Service layer for BROKERBOOT.

Coordinates the bootstrap use case: resolve identity, parse destinations,
synthesize arguments, create the broker instance and hand over to it.
Depends on `brokerboot.interfaces` ports, never on concrete adapters.
"""
