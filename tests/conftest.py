import pytest
import sys
from pathlib import Path
import json

# Add src to python path so we can import modules
root_dir = Path(__file__).parent.parent
src_dir = root_dir / "src"
sys.path.insert(0, str(src_dir))

from services.data_service import DataService
from core.container import ServiceContainer
from core.enums import OrderType
from api.app import create_app

TEST_PRICES = [
    {"material": "A", "unit_price": 2.5, "notes": "原料A"},
    {"material": "B", "unit_price": 4.0, "notes": ""},
]


@pytest.fixture
def prices_file(tmp_path):
    """Default material price list used to seed new documents."""
    p = tmp_path / "default-material-prices.json"
    p.write_text(json.dumps(TEST_PRICES, ensure_ascii=False), encoding='utf-8')
    return p


@pytest.fixture
def data_file(tmp_path):
    """Path of the order document; the file itself does not exist yet."""
    return tmp_path / "data.json"


@pytest.fixture
def data_service(data_file, prices_file):
    """DataService pointed at temporary files, backups kept next to them."""
    return DataService(
        data_file=data_file,
        backup_dir=data_file.parent / "backups",
        default_prices_file=prices_file,
        lock_timeout=2,
    )


@pytest.fixture
def container(data_service):
    return ServiceContainer(data_service)


@pytest.fixture
def injection_service(container):
    return container.orders(OrderType.INJECTION)


@pytest.fixture
def slush_service(container):
    return container.orders(OrderType.SLUSH)


@pytest.fixture
def spray_service(container):
    return container.orders(OrderType.SPRAY)


@pytest.fixture
def problem_service(container):
    return container.problem_service


@pytest.fixture
def material_service(container):
    return container.material_service


@pytest.fixture
def requisition_service(container):
    return container.requisition_service


@pytest.fixture
def analysis_service(container):
    return container.analysis_service


@pytest.fixture
def client(container):
    """Flask test client sharing the temporary data service."""
    app = create_app(container, {"TESTING": True})
    return app.test_client()
