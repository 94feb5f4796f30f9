"""
Main settings file for the project.

Settings are split into ``components/`` (shared by every environment)
and ``environments/`` (selected with the ``DJANGO_ENV`` variable).
"""

from os import environ

import django_stubs_ext
from split_settings.tools import include, optional

# Lets generic Django classes be subscripted at runtime
django_stubs_ext.monkeypatch()

environ.setdefault('DJANGO_ENV', 'development')
_ENV = environ['DJANGO_ENV']

_base_settings = (
    'components/common.py',
    'components/logging.py',
    'components/storages.py',
    'components/files.py',
    # Select the right env:
    'environments/{0}.py'.format(_ENV),
    # Optionally override some settings:
    optional('environments/local.py'),
)

include(*_base_settings)
