"""Application layer: configuration, HTTP API and serverless handlers."""
