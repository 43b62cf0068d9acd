"""FastAPI server adapter for multi-llm-orchestrator.

Design intent:
- Keep workflow rules in `multi_llm_orchestrator.workflow` and `.domain`
- Keep server-specific concerns (routing, CORS, correlation ids, problem details) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from multi_llm_orchestrator.server.app import create_app
