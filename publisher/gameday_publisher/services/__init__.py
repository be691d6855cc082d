"""Feed generation, admin write paths and run orchestration."""
