import os

import django
from django.test.utils import setup_test_environment


def pytest_configure():
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'automata_site.settings')
    django.setup()
    setup_test_environment()
