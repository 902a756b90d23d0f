from pathlib import Path
import sys
import pytest
import yaml

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if SRC_DIR.exists() and str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from doughcalc.core.io import load_presets
from doughcalc.messages import MessageCatalog


@pytest.fixture(scope="session")
def repo_root() -> Path:
    return Path(__file__).resolve().parents[1]

@pytest.fixture(scope="session")
def data_dir(repo_root: Path) -> Path:
    # preset and message catalogs ship inside the package
    d = repo_root / "src" / "doughcalc" / "data"
    if not d.exists():
        pytest.skip("src/doughcalc/data directory not found; skipping data-dependent tests.")
    return d

@pytest.fixture(scope="session")
def presets(data_dir: Path):
    return load_presets(data_dir / "presets.yml")

@pytest.fixture(scope="session")
def catalog(data_dir: Path) -> MessageCatalog:
    return MessageCatalog.load(data_dir / "messages.yml", default="en")

@pytest.fixture(scope="session")
def yload():
    def _load(p: Path):
        with p.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    return _load
