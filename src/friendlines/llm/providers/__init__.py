from .openai import OpenAIInterviewProvider

__all__ = ["OpenAIInterviewProvider"]
