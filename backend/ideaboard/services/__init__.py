# Services package init
"""
IdeaBoard Backend — Services Layer
====================================

What:  Business logic between routes (HTTP) and the JSON store (persistence).

Service Inventory:
    - IdeaService: create / vote / note as read-modify-write cycles on IdeaStore
    - FileService: attachment upload storage, download lookup and cleanup
"""
