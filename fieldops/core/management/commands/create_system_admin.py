"""
Management command to create the first system admin user
Usage: python manage.py create_system_admin [--username admin] [--email admin@fieldops.local] [--password ...]

Falls back to SYSTEM_ADMIN_USERNAME, SYSTEM_ADMIN_EMAIL and SYSTEM_ADMIN_PASSWORD
environment variables.
"""
import os
from django.core.management.base import BaseCommand, CommandError
from django.contrib.auth import get_user_model

User = get_user_model()


class Command(BaseCommand):
    help = 'Create the first system_admin user (no agency)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--username',
            default=os.getenv('SYSTEM_ADMIN_USERNAME', 'admin'),
            help='Username for the system admin',
        )
        parser.add_argument(
            '--email',
            default=os.getenv('SYSTEM_ADMIN_EMAIL', 'admin@fieldops.local'),
            help='Email for the system admin',
        )
        parser.add_argument(
            '--password',
            default=os.getenv('SYSTEM_ADMIN_PASSWORD'),
            help='Password for the system admin',
        )

    def handle(self, *args, **options):
        username = options['username']
        password = options['password']

        if User.objects.filter(username=username).exists():
            self.stdout.write(self.style.WARNING(f'User {username} already exists. Nothing to do.'))
            return

        if not password:
            raise CommandError('A password is required (--password or SYSTEM_ADMIN_PASSWORD).')

        User.objects.create_user(
            username=username,
            email=options['email'],
            password=password,
            role=User.ROLE_SYSTEM_ADMIN,
            agency=None,
            is_staff=True,
        )
        self.stdout.write(self.style.SUCCESS(f'System admin created: {username}'))
        self.stdout.write('Change the password after first login.')
