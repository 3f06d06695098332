"""
Шлюз к OpenAI Assistants API: треды, сообщения, запуски и stateless-чат.
"""

__version__ = "1.0.0"
