"""Interface adapters: HTTP API, MCP tools and CLI."""
