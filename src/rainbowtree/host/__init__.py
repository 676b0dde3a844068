"""Command host: shell loop, dispatch, interrupt routing and shared state."""
