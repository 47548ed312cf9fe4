"""External integrations: persistence of pod registrations."""

from .datastore import PodRegistry, SQLPodRegistry
