"""Infrastructure — process-level setup around the core (logging)."""
