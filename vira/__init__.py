"""ViRA.

Vendor relationship management service: vendors, clients, projects and the
ratings collected when projects close, plus the workflows built around them.

Core subpackages
----------------

- ``vira.core``:

  - Logging and Logfire monitoring setup.
  - The SQLModel persistence layer (entities, async repositories, sessions).
  - Pydantic I/O schemas shared by the HTTP API.

- ``vira.server``:

  - The FastAPI application, configuration and middleware.
  - Versioned API routers under ``/api/v1``.
  - Services: CSV import/export, vendor merging, ViRA Match, review
    reminders, vendor onboarding and the outbound email, identity and
    embedding clients.
"""

__version__ = "0.1.0"
