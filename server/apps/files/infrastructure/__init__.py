"""Infrastructure layer for files app.

Integrations with external systems:
- S3-compatible storage backend (AWS S3, MinIO)
- Resolution of upload payloads to raw bytes
"""
