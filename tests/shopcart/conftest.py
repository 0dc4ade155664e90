import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def shopcart_bed():
    from shopcart.domain import shopcart

    bed = DomainFixture(shopcart)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(shopcart_bed):
    with shopcart_bed.domain_context():
        yield
