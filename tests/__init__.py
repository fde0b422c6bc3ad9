# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Pantry API:
# - test_config.py: settings parsing and derived values
# - test_pipeline.py: stage order, routing table, docs, security headers
# - test_errors.py: error envelope and fallback 404
# - test_cache.py: disable-cache stage
# - test_session.py: cookie signing, session lifecycle
# - test_session_store.py: memory and Supabase stores
# - test_auth.py: login/logout/me and the Supabase strategy
# - test_access_log.py: combined-format access log
# - test_documents.py: food and recipe endpoints
# - test_upload.py: image upload
# - test_lifespan.py: database connection at startup
#
# Run tests with: pytest
# =============================================================================
