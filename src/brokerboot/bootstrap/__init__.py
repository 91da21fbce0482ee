"""Bootstrap (composition root) for BROKERBOOT.

Assembles the application at runtime: wires concrete adapters (``ip`` route
source, Artemis tool, redactor) into the service-layer orchestrator, reads
configuration, and exposes a small facade for entrypoints.

Import rules:
- Entry points import *this* package (not adapters/service_layer/interfaces/domain).
- This package may import: `brokerboot.adapters`, `brokerboot.service_layer`,
  `brokerboot.interfaces`, `brokerboot.domain`, and `brokerboot.config`.
- Inner layers must not import `brokerboot.bootstrap`.

Public surface:
- Re-export composition factories from this module; keep wiring helpers internal.
- No business rules live here; this is assembly and lifecycle only.
"""

from .bootstrap import AppContainer, bootstrap, build_context, make_redactor

__all__ = ["AppContainer", "bootstrap", "build_context", "make_redactor"]
