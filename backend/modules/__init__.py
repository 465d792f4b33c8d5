"""
Feature modules for the bbtap backend.

Each module is self-contained with its own:
- interfaces.py: Protocol definitions for the module's public API
- models.py: Pydantic models for data transfer
- service.py: Business logic implementation
- repository.py: Supabase table access
- routes.py: FastAPI route handlers
- exceptions.py: Module-specific exceptions

The pure cores (entitlements.evaluator, analytics.aggregator,
profiles.rendering) do no I/O and are safe to call from anywhere.
Modules communicate through interfaces, not concrete implementations.
"""
