"""
IdeaBoard Backend — Application Package Initializer
====================================================

What: Marks the `ideaboard` directory as a Python package.
Who:  Used by uvicorn (`ideaboard.main:app`), the `ideaboard` console script and pytest.

Architecture Note:
    The backend is layered:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← create / vote / note
    ├─────────────────────────────────────┤
    │           Schemas (Records)         │  ← Idea, Note, Attachment
    ├─────────────────────────────────────┤
    │      Store (JSON Persistence)       │  ← one ideas.json, rewritten wholesale
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
