from types import SimpleNamespace

from tgrelay.config import Settings
from tgrelay.media.models import AccessLogEntry, RatingRecord
from tgrelay.services import supabase as store_module
from tgrelay.services.supabase import RatingStore


class FakeQuery:
    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.ops = []

    def __getattr__(self, name):
        def _op(*args):
            self.ops.append((name, args))
            return self

        return _op

    def execute(self):
        self.client.executed.append((self.table, self.ops))
        if self.client.error is not None:
            raise self.client.error
        return SimpleNamespace(data=self.client.rows)


class FakeClient:
    def __init__(self, rows=None, error=None):
        self.rows = rows or []
        self.error = error
        self.executed = []

    def table(self, name):
        return FakeQuery(self, name)

    def rpc(self, fn, params):
        query = FakeQuery(self, f"rpc:{fn}")
        query.ops.append(("params", (params,)))
        return query


def test_from_settings_without_credentials():
    assert RatingStore.from_settings(Settings(bot_token="T", channel_id="C")) is None


def test_from_settings_builds_client(monkeypatch):
    created = []
    monkeypatch.setattr(store_module, "create_client", lambda url, key: created.append((url, key)) or FakeClient())

    store = RatingStore.from_settings(
        Settings(bot_token="T", channel_id="C", supabase_url="https://x.supabase.co", supabase_key="anon")
    )

    assert isinstance(store, RatingStore)
    assert created == [("https://x.supabase.co", "anon")]


def test_insert_access_log():
    client = FakeClient()
    RatingStore(client).insert_access_log(
        AccessLogEntry(url="/cfile/A", referer="r", ip="1.2.3.4", time="2024-05-02 04:30:05")
    )

    table, ops = client.executed[0]
    assert table == "tgimglog"
    assert ops == [("insert", ({"url": "/cfile/A", "referer": "r", "ip": "1.2.3.4", "time": "2024-05-02 04:30:05"},))]


def test_insert_rating_record_starts_total_at_one():
    client = FakeClient()
    RatingStore(client).insert_rating_record(
        RatingRecord(url="/cfile/A", referer="r", ip="ip", rating=0, time="t")
    )

    table, ops = client.executed[0]
    assert table == "imginfo"
    assert ops[0][1][0]["total"] == 1
    assert ops[0][1][0]["rating"] == 0


def test_get_rating_found():
    client = FakeClient(rows=[{"rating": 3}])

    assert RatingStore(client).get_rating("/cfile/A") == 3
    _, ops = client.executed[0]
    assert ("eq", ("url", "/cfile/A")) in ops


def test_get_rating_missing_or_failed():
    assert RatingStore(FakeClient(rows=[])).get_rating("/cfile/A") is None
    assert RatingStore(FakeClient(error=RuntimeError("down"))).get_rating("/cfile/A") is None


def test_increment_total_uses_rpc():
    client = FakeClient()
    RatingStore(client).increment_total("/cfile/A")

    table, ops = client.executed[0]
    assert table == "rpc:imginfo_increment_total"
    assert ops == [("params", ({"target_url": "/cfile/A"},))]
