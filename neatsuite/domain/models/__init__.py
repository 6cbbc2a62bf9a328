"""Domain models: configuration, request/response records and errors."""
