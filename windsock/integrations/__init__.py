"""Third-party API clients."""
