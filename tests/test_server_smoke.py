from note_lookup.server import LookupService
from note_lookup.vaults import Vault


def _service(tmp_path, *names: str) -> LookupService:
    vaults = {}
    for name in names or ("vault",):
        root = tmp_path / name
        root.mkdir()
        vaults[name] = Vault(name, root)
    return LookupService(vaults)


def test_lookup_service_smoke(tmp_path):
    service = _service(tmp_path)
    assert service.list_available_vaults() == {"vaults": ["vault"]}

    lookup = service.lookup("projects.alpha")
    assert lookup["ok"]
    assert lookup["results"][0]["kind"] == "create"
    assert lookup["results"][0]["path"] == "projects.alpha"

    created = service.create_note("projects.alpha")
    assert created["ok"] and created["title"] == "Alpha"

    lookup = service.lookup("projects.alpha")
    first = lookup["results"][0]
    assert first["kind"] == "note"
    assert first["path"] == "projects.alpha"
    assert first["exists"] and first["vault"] == "vault"
    assert first["highlight"] == [0, len("projects.alpha")]

    read = service.read_note("projects.alpha")
    assert read["exists"] and "title: Alpha" in read["content"]

    duplicate = service.create_note("projects.alpha")
    assert not duplicate["ok"]


def test_lookup_lists_virtual_parents(tmp_path):
    service = _service(tmp_path)
    (tmp_path / "vault" / "projects.alpha.md").write_text("", encoding="utf-8")

    browse = service.lookup("")
    assert [(r["path"], r["exists"]) for r in browse["results"]] == [
        ("root", False),
        ("projects", False),
    ]


def test_lookup_respects_max_results(tmp_path):
    service = _service(tmp_path)
    for name in ["a.one", "a.two", "a.three"]:
        (tmp_path / "vault" / f"{name}.md").write_text("", encoding="utf-8")

    result = service.lookup("a.", max_results=2)
    assert len(result["results"]) == 2


def test_title_lookup_has_no_highlight(tmp_path):
    service = _service(tmp_path)
    (tmp_path / "vault" / "misc.md").write_text("---\ntitle: Project notes\n---\n", encoding="utf-8")

    result = service.lookup("?project")
    assert [(r["path"], r["highlight"]) for r in result["results"]] == [("misc", None)]


def test_create_note_requires_root_confirmation(tmp_path):
    service = _service(tmp_path)

    refused = service.create_note("root.child")
    assert not refused["ok"]
    assert "omit_root" in refused["error"]

    stripped = service.create_note("root.child", omit_root=True)
    assert stripped["ok"]
    assert (tmp_path / "vault" / "child.md").exists()

    kept = service.create_note("root.other", omit_root=False)
    assert kept["ok"]
    assert (tmp_path / "vault" / "root.other.md").exists()


def test_create_note_requires_vault_when_ambiguous(tmp_path):
    service = _service(tmp_path, "vault-a", "vault-b")

    result = service.create_note("inbox")
    assert not result["ok"]
    assert "multiple vaults" in result["error"].lower()

    result = service.create_note("inbox", vault="vault-b")
    assert result["ok"]
    assert (tmp_path / "vault-b" / "inbox.md").exists()


def test_choose_opens_or_creates(tmp_path):
    service = _service(tmp_path)
    (tmp_path / "vault" / "journal.md").write_text("Dear diary", encoding="utf-8")

    opened = service.choose("journal")
    assert opened["ok"] and opened["content"] == "Dear diary"

    created = service.choose("journal.today")
    assert created["ok"]
    assert (tmp_path / "vault" / "journal.today.md").exists()

    missing = service.choose("journal", index=5)
    assert not missing["ok"]


def test_choose_materialises_virtual_note(tmp_path):
    service = _service(tmp_path)
    (tmp_path / "vault" / "area.topic.md").write_text("", encoding="utf-8")

    result = service.choose("area.", index=0)
    assert result["ok"]
    assert (tmp_path / "vault" / "area.topic.md").read_text(encoding="utf-8") == ""

    result = service.choose("are", index=1)
    assert result["ok"]
    assert (tmp_path / "vault" / "area.md").exists()


def test_choose_rejects_negative_index(tmp_path):
    service = _service(tmp_path)
    (tmp_path / "vault" / "journal.md").write_text("Dear diary", encoding="utf-8")

    result = service.choose("journal", index=-1)
    assert not result["ok"]
    assert "index -1" in result["error"]


def test_negative_max_results_returns_everything(tmp_path):
    service = _service(tmp_path)
    for name in ["a.one", "a.two", "a.three"]:
        (tmp_path / "vault" / f"{name}.md").write_text("", encoding="utf-8")

    result = service.lookup("a.", max_results=-1)
    assert len(result["results"]) == 3
