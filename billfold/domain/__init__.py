"""Domain models and pure functions for billfold.

Nothing in this package touches the database, the console or the
filesystem. Services in ``billfold.services`` combine these functions with
the store.
"""

from billfold.domain.models import ISODate, Money, Month

__all__ = ["ISODate", "Money", "Month"]
