"""Transport plumbing: ASGI send, static files, development server."""
