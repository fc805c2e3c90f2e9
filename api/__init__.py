"""api/ -- HTTP layer for UserHub: app assembly, transport models, and routes."""
