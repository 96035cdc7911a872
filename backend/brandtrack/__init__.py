"""
AI Brand Track - brand visibility analytics for AI chatbot responses
"""

__version__ = "1.0.0"
