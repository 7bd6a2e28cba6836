"""Tests for the in-memory case store."""

from datetime import UTC, datetime, timedelta

from mecenas.store import InMemoryCaseStore
from mecenas.store.models import Article


class TestClients:
    def test_create_and_get(self, store):
        client = store.create_client(name="Anna Nowak", type="osoba_fizyczna")
        assert store.get_client(client.id) == client

    def test_list_sorted_by_name(self, store):
        store.create_client(name="Zenon", type="osoba_fizyczna")
        store.create_client(name="Adam", type="osoba_fizyczna")
        assert [c.name for c in store.list_clients()] == ["Adam", "Zenon"]

    def test_search_by_pesel_and_name(self, store, client_and_case):
        assert len(store.search_clients("44051401359")) == 1
        assert len(store.search_clients("kowal")) == 1
        assert store.search_clients("nieistnieje") == []

    def test_update_ignores_none_and_id(self, store):
        client = store.create_client(name="Anna Nowak", type="osoba_fizyczna", email="a@example.com")
        updated = store.update_client(client.id, email=None, phone="600123456", id="other")
        assert updated.id == client.id
        assert updated.email == "a@example.com"
        assert updated.phone == "600123456"

    def test_delete_cascades_to_cases(self, store, client_and_case):
        client, legal_case = client_and_case
        assert store.delete_client(client.id)
        assert store.get_case(legal_case.id) is None
        assert not store.delete_client(client.id)


class TestCases:
    def test_list_filters(self, store, client_and_case):
        client, _ = client_and_case
        store.create_case(client_id=client.id, title="Druga", law_area="karne", status="zamknieta")
        assert len(store.list_cases(client_id=client.id)) == 2
        assert len(store.list_cases(status="zamknieta")) == 1
        assert len(store.list_cases(law_area="cywilne")) == 1

    def test_search_by_sygnatura(self, store, client_and_case):
        assert len(store.search_cases("i c 123")) == 1

    def test_update_bumps_updated_at(self, store, client_and_case):
        _, legal_case = client_and_case
        updated = store.update_case(legal_case.id, status="w_toku")
        assert updated.status == "w_toku"
        assert updated.updated_at >= legal_case.updated_at

    def test_delete_cascades(self, store, client_and_case):
        _, legal_case = client_and_case
        now = datetime.now(UTC)
        deadline = store.create_deadline(case_id=legal_case.id, title="T", date=now, type="procesowy")
        doc = store.create_document(case_id=legal_case.id, type="pozew", title="P", content="x")
        store.record_ai_consent(legal_case.id, "mecenas", "local_only")

        assert store.delete_case(legal_case.id)

        assert store.get_deadline(deadline.id) is None
        assert store.get_document(doc.id) is None
        assert store.get_ai_consent(legal_case.id) is None


class TestDeadlines:
    def test_upcoming_excludes_past_and_completed(self, store, client_and_case):
        _, legal_case = client_and_case
        now = datetime.now(UTC)
        store.create_deadline(case_id=legal_case.id, title="past", date=now - timedelta(days=1), type="procesowy")
        done = store.create_deadline(
            case_id=legal_case.id, title="done", date=now + timedelta(days=1), type="procesowy"
        )
        store.complete_deadline(done.id)
        store.create_deadline(case_id=legal_case.id, title="soon", date=now + timedelta(days=2), type="procesowy")

        upcoming = store.list_deadlines(upcoming=True, now=now)
        assert [d.title for d in upcoming] == ["soon"]

    def test_completed_filter_and_order(self, store, client_and_case):
        _, legal_case = client_and_case
        now = datetime.now(UTC)
        store.create_deadline(case_id=legal_case.id, title="b", date=now + timedelta(days=5), type="procesowy")
        store.create_deadline(case_id=legal_case.id, title="a", date=now + timedelta(days=1), type="procesowy")
        assert [d.title for d in store.list_deadlines(completed=False)] == ["a", "b"]


class TestDocuments:
    def test_content_change_creates_version(self, store):
        doc = store.create_document(type="pozew", title="Pozew", content="v1")

        store.update_document(doc.id, content="v2")
        store.update_document(doc.id, title="Pozew o zapłatę")

        versions = store.get_document_versions(doc.id)
        assert [v.version for v in versions] == [1, 2]
        assert versions[0].content == "v1"
        assert versions[-1].title == "Pozew o zapłatę"

    def test_versions_of_missing_document(self, store):
        assert store.get_document_versions("missing") == []


class TestArticles:
    def test_lookup_and_search(self):
        store = InMemoryCaseStore(
            articles=[
                Article("KC", "415", "Kto z winy swej wyrządził drugiemu szkodę, obowiązany jest do jej naprawienia."),
                Article("KPC", "187", "Pozew powinien czynić zadość warunkom pisma procesowego."),
            ]
        )
        assert store.get_article("kc", "415") is not None
        assert [a.article_number for a in store.search_articles("szkod")] == ["415"]
        assert store.search_articles("pozew", code_name="KC") == []
        assert [a.article_number for a in store.search_articles("187")] == ["187"]
