"""HTTP and WebSocket routes, request/response models, and dependencies."""
