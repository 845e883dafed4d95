"""Scriptorium.

A blogging platform with an embedded code-template editor and a code
execution feature.

High-level architecture
-----------------------

- ``scriptorium.core``:

  - Cross-cutting building blocks: logging, monitoring, password
    hashing and token signing.
  - The database layer (SQLModel entities, async repositories, session
    management).
  - I/O models that define the API contract.

- ``scriptorium.execution``:

  - The language registry and the child-process runner used to compile and
    run user submitted code.

- ``scriptorium.server``:

  - The FastAPI application, its routers, middleware, exception handlers and
    the service layer assembling read models.

Typical workflow
----------------

1. A user registers and logs in to obtain a bearer token.
2. They save code templates and write blog posts that link them.
3. Other users comment, reply, vote and report content.
4. Administrators hide reported content and manage users.
"""

__version__ = "0.1.0"
