"""Developer helpers (timing instrumentation)."""
