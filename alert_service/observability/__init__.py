"""Error reporting and tracing setup."""
