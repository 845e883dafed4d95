"""
Service layer.

Modules:
- deps: Annotated FastAPI dependencies (session, current user, code runner)
- content: Read-model assembly and visibility rules
- uploads: Avatar storage
"""
