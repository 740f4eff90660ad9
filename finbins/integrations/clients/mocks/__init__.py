"""
Mock integration clients.

These return realistic responses without calling any backend. They are used
for synthetic (demo) sessions, and by the FastAPI demo backend in finbins.api.

Important:
- Mock payloads must match the real API contracts field for field
  (see integrations/contracts), since callers cannot tell them apart.
"""
