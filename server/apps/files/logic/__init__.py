"""Business logic layer for files app.

Upload validation, metadata persistence and the upload, replace and
delete flows that keep storage and database in step. Views stay thin
and delegate here.
"""
