#!/usr/bin/env python
"""
Run the fieldops test suites without going through manage.py.

Usage:
    python fieldops/run_tests.py                       # every fieldops app
    python fieldops/run_tests.py allocations visits    # selected apps
    python fieldops/run_tests.py -v 2 reports
"""
import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def project_apps(installed_apps):
    return [app for app in installed_apps if app.startswith('fieldops.')]


def resolve_labels(requested, installed_apps):
    """Map short app names (``visits``) to installed labels; unknown names are passed through"""
    apps = project_apps(installed_apps)
    if not requested:
        return apps
    labels = []
    for name in requested:
        full = name if name.startswith('fieldops.') else f'fieldops.{name}'
        labels.append(full if full in apps else name)
    return labels


def main(argv=None):
    parser = argparse.ArgumentParser(description='Run fieldops tests')
    parser.add_argument('apps', nargs='*', help='app names, e.g. allocations or fieldops.reports')
    parser.add_argument('-v', '--verbosity', type=int, default=1)
    parser.add_argument('--failfast', action='store_true')
    args = parser.parse_args(argv)

    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'fieldops.config.settings')
    import django
    from django.conf import settings
    from django.test.utils import get_runner

    django.setup()
    runner = get_runner(settings)(verbosity=args.verbosity, failfast=args.failfast)
    failures = runner.run_tests(resolve_labels(args.apps, settings.INSTALLED_APPS))
    return 1 if failures else 0


if __name__ == '__main__':
    sys.exit(main())
