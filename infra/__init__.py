"""Infrastructure: configuration and logging."""
