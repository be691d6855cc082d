"""HTTP surface: health check and the manual feed regeneration trigger."""
