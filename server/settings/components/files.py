"""Upload rules and storage conventions for the files app."""

from server.settings.components import config

# Uploads strictly larger than this are rejected
FILES_MAX_UPLOAD_BYTES = 5 * 1024 * 1024

# Unsigned public URL of a stored object.
# Available fields: {bucket}, {region}, {endpoint}, {key}
FILES_PUBLIC_URL_TEMPLATE = config(
    'FILES_PUBLIC_URL_TEMPLATE',
    default='https://{bucket}.s3.{region}.amazonaws.com/{key}',
)

# When False, storage delete errors are logged and the record is
# soft deleted anyway
FILES_STRICT_STORAGE_DELETE = config(
    'FILES_STRICT_STORAGE_DELETE',
    cast=bool,
    default=False,
)

FILES_RECONCILE_BATCH_SIZE = config(
    'FILES_RECONCILE_BATCH_SIZE',
    cast=int,
    default=1000,
)

# Objects younger than this may belong to an upload still in progress
FILES_RECONCILE_MIN_AGE_MINUTES = config(
    'FILES_RECONCILE_MIN_AGE_MINUTES',
    cast=int,
    default=60,
)
