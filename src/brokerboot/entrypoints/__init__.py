"""Entrypoints (inbound adapters) for BROKERBOOT.

Expose the application to the outside world: the ``brokerboot`` console
command used as the container entrypoint. Parse and validate inputs, call the
composition root, and present results.

Dependency rule: may import `brokerboot.bootstrap` and `brokerboot.domain`
errors; avoid importing `brokerboot.adapters` directly.
"""
