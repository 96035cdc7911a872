"""
Adapters for AI response processing
"""
