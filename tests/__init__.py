# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for ErrorChain:
# - test_models.py: Request/Response immutability and helpers
# - test_failures.py: Failure taxonomy and reason phrases
# - test_chain.py: Stage ordering, interception and propagation
# - test_error_handling.py: Error stage handlers, rendering and logging
# - test_diagnostics.py: Diagnostic hook, sinks and the capture stage
# - test_routing.py: Router matching and endpoint results
# - test_boundary.py: Request parsing and the outer boundary
# - test_templates.py: Template renderer lifecycle
# - test_api.py: End-to-end requests through the FastAPI app
#
# Run tests with: pytest
# =============================================================================
