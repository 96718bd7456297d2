"""Services: money helpers, catalog models and repositories."""
