"""Adapters (outbound implementations) for BROKERBOOT.

Concrete implementations of the ports in `brokerboot.interfaces`: the ``ip``
route source, the Artemis command-line tool, in-memory stand-ins, and the
regex redactor.
"""
