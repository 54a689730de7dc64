"""Request-time services: LLM access, live discovery and chat search."""
