"""
Tests Module: Unit and Integration Tests

Test Coverage:
    - Hash primitives and SigV4 signing (cross-checked with botocore)
    - Storage configuration and validation
    - Object key generation
    - Connection probe and upload transport (httpx.MockTransport)
    - Error taxonomy, logging, preview helpers, CLI
"""
