from chatbot.ollama.client import OllamaClient, OllamaError

__all__ = ["OllamaClient", "OllamaError"]
