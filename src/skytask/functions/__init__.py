"""
Server-side functions (hold the LLM API key).

Components:
- subtasks.py: prompt + reply parsing for subtask generation
- search.py: embedding + similarity procedure call
- app.py: Flask app exposing both over HTTP
- client.py: httpx clients the front-end uses to call them
"""
