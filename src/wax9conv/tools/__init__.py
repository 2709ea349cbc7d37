"""Developer tooling helpers (debug timing hooks)."""
