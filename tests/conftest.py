from types import SimpleNamespace

import pytest

from tgrelay.config import Settings
from tgrelay.errors import TelegramError
from tgrelay.main import create_app
from tgrelay.tasks import DeferredTasks


class FakeTelegram:
    def __init__(self):
        self.send_reply = {"ok": True, "result": {"document": {"file_id": "DOC1", "file_name": "a.pdf"}}}
        self.send_error = None
        self.file_paths = {}
        self.downloads = {}
        self.sent = []
        self.resolved = []

    def send_file(self, route, filename, stream, mime_type=None):
        self.sent.append(
            {"route": route, "filename": filename, "content": stream.read(), "mime_type": mime_type}
        )
        if self.send_error is not None:
            raise self.send_error
        return self.send_reply

    def get_file_path(self, file_id):
        self.resolved.append(file_id)
        if file_id not in self.file_paths:
            raise TelegramError(
                "Failed to get file path from Telegram API",
                {"ok": False, "error_code": 400, "description": "Bad Request: invalid file_id"},
            )
        return self.file_paths[file_id]

    def file_url(self, file_path):
        return f"https://api.telegram.org/file/botTOKEN/{file_path}"

    def download(self, file_path):
        return self.downloads[file_path]


class FakeRating:
    def __init__(self, value=0, api_url="https://rate.example.com/check"):
        self.value = value
        self.api_url = api_url
        self.rated = []

    def rate(self, file_url):
        self.rated.append(file_url)
        return self.value


class FakeStore:
    def __init__(self):
        self.ratings = {}
        self.access_logs = []
        self.rating_records = []
        self.increments = []
        self.lookups = []
        self.fail_writes = False

    def insert_access_log(self, entry):
        if self.fail_writes:
            raise RuntimeError("tgimglog insert failed")
        self.access_logs.append(entry)

    def insert_rating_record(self, record):
        if self.fail_writes:
            raise RuntimeError("imginfo insert failed")
        self.rating_records.append(record)

    def increment_total(self, url):
        if self.fail_writes:
            raise RuntimeError("imginfo update failed")
        self.increments.append(url)

    def get_rating(self, url):
        self.lookups.append(url)
        return self.ratings.get(url)


def upstream(content=b"\xff\xd8jpegbytes", status_code=200, text=""):
    return SimpleNamespace(ok=status_code < 400, status_code=status_code, content=content, text=text)


@pytest.fixture
def settings():
    return Settings(bot_token="TOKEN", channel_id="-100123")


@pytest.fixture
def telegram():
    return FakeTelegram()


@pytest.fixture
def rating():
    return FakeRating()


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def tasks():
    runner = DeferredTasks(max_workers=2)
    yield runner
    runner.shutdown()


@pytest.fixture
def app(settings, telegram, rating, store, tasks):
    return create_app(settings, telegram=telegram, rating=rating, store=store, tasks=tasks)


@pytest.fixture
def client(app):
    return app.test_client()
