"""
Test Suite for vaultseed

Covers:
- Configuration loading and validation
- Store handle and transactions
- Schema descriptors and bootstrap
- Record generators
- Batch loading and rollback
- Verification reporting
- End-to-end orchestration and CLI
"""
