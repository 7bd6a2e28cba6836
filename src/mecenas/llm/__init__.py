"""LLM clients for the local (Ollama) and cloud (Anthropic) providers."""
