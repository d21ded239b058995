"""decadegen adapter package.

Architectural role:
- Defines the external interaction boundary (HTTP server, HTTP client, CLI).
- Performs transport-level parsing and response shaping.
- Delegates validation and model orchestration to `decadegen.image.service`.
"""
