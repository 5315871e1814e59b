"""
Ranking-model assist.

Responsibilities:
- Manage Groq API configuration and credentials.
- Build a prompt from the candidate pool and the user's trip preferences.
- Ask the model for a preferred subset of place ids, in visiting priority.
- Degrade to an empty ranking when the model is unavailable or unparsable.
"""
