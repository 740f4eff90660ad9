"""
Contracts (data models).

Request/response shapes shared by the mock and real API clients:
- Bucket, Transaction, Recommendation and FinancialSummary records
- Auth and chat payloads

Both clients/mocks/* and clients/real_http/* must produce payloads that
serialize to these models, so callers never learn which one answered.
"""
