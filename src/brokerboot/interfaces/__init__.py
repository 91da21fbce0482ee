"""Ports (abstract interfaces) for BROKERBOOT.

Defines the contracts the service layer depends on: where routing information
comes from, how the external broker tool is driven, and how sensitive values
are redacted before display. Adapters implement these; the domain never
imports them.
"""
