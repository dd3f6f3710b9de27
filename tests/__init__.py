"""
NextVOD Test Suite

Test Categories:
- unit/: Fast, isolated unit tests
- integration/: HTTP API and database-backed playout tests
- fixtures/: Shared factories and fakes
"""
