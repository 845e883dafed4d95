"""Domain and I/O models for Scriptorium."""
