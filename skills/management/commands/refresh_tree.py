from django.core.management.base import BaseCommand, CommandError

from skills.services.store import get_store
from skills.services.tree import tree_store


class Command(BaseCommand):
    help = "Refetch the hospital tree from the store into the cache; broadcast WebSocket refresh event."

    def add_arguments(self, parser):
        parser.add_argument('--clear', action='store_true', help='Drop the cached tree before fetching.')

    def handle(self, *args, **options):
        if options['clear']:
            tree_store.clear()
        result = tree_store.resync(get_store())
        if not result.ok:
            raise CommandError(result.error)

        departments = sum(len(h['departments']) for h in result.hospitals)
        self.stdout.write(self.style.SUCCESS(
            f"Loaded {len(result.hospitals)} hospitals, {departments} departments, "
            f"{len(tree_store.index())} credentials"
        ))
