"""Home record generator for sample ledgers and load scripts."""

from typing import Iterator

from home_transfer.generators.base import BaseGenerator
from home_transfer.models import HomeRecord

HOME_KINDS = ("Home", "House", "Cottage", "Villa", "Loft", "Residence")


class HomeRecordGenerator(BaseGenerator):
    """Generate synthetic home ownership records.

    Ids are sequential (``prefix`` + counter) unless ``use_uuid`` is set, so
    seeded runs produce the same keys.
    """

    def __init__(
        self,
        seed: int | None = None,
        locale: str = "en_US",
        prefix: str = "home-",
        start: int = 1,
        use_uuid: bool = False,
    ) -> None:
        super().__init__(seed, locale)
        self.prefix = prefix
        self.use_uuid = use_uuid
        self._next = start

    def _next_id(self) -> str:
        if self.use_uuid:
            return self.fake.uuid4()
        record_id = f"{self.prefix}{self._next}"
        self._next += 1
        return record_id

    def generate(self) -> HomeRecord:
        """Generate a home record.

        Returns
        -------
        HomeRecord
            Generated record.
        """
        return HomeRecord(
            id=self._next_id(),
            name=f"{self.fake.street_name()} {self.random.choice(HOME_KINDS)}",
            area=str(self.random.randint(40, 5000)),
            owner=self.fake.name(),
            value=str(self.random.randint(50, 2500) * 1000),
        )

    def generate_batch(self, count: int) -> list[HomeRecord]:
        """Generate ``count`` records."""
        return [self.generate() for _ in range(count)]

    def stream(self) -> Iterator[HomeRecord]:
        """Generate records indefinitely."""
        while True:
            yield self.generate()
