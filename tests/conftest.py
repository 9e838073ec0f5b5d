import pytest

from quotes_crawler.utils.config import Config
from tests.helpers import SleepRecorder


@pytest.fixture
def sleeper() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def config(tmp_path) -> Config:
    config = Config()
    config.crawler.index_url = "http://quotes.test/themes/"
    config.output.file = str(tmp_path / "data.json")
    return config
