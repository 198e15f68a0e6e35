import json

import pytest

from promptbank.errors import ErrorCode, PromptBankError
from promptbank.models import Category, Prompt, PromptBank
from promptbank.storage import Storage


@pytest.fixture
def storage(tmp_path):
    return Storage(data_path=tmp_path / "nested" / "prompts.json")


@pytest.fixture
def sample_bank():
    bank = PromptBank()
    bank.add(
        Prompt.create(
            name="test-prompt",
            category=Category.parse("template"),
            description="A greeting",
            content="Hello {{name}}, welcome to {{place}}",
            tags=["greeting"],
        )
    )
    bank.add(
        Prompt.create(
            name="custom-one",
            category=Category.parse("custom:notes"),
            description="",
            content="No variables here",
        )
    )
    return bank


class TestLoad:
    def test_missing_file_is_empty(self, storage):
        bank = storage.load()
        assert bank.prompts == []
        assert bank.version == "1.0"
        assert not storage.data_path.exists()

    def test_malformed_json_raises(self, storage):
        storage.data_path.parent.mkdir(parents=True)
        storage.data_path.write_text("not valid json {{{")
        with pytest.raises(PromptBankError) as exc_info:
            storage.load()
        assert exc_info.value.code == ErrorCode.PARSE_ERROR

    def test_malformed_record_raises(self, storage):
        storage.data_path.parent.mkdir(parents=True)
        storage.data_path.write_text(json.dumps({"prompts": [{"id": "x"}], "version": "1.0"}))
        with pytest.raises(PromptBankError) as exc_info:
            storage.load()
        assert exc_info.value.code == ErrorCode.PARSE_ERROR

    def test_unreadable_path_raises_io(self, tmp_path):
        directory = tmp_path / "adir"
        directory.mkdir()
        with pytest.raises(PromptBankError) as exc_info:
            Storage(directory).load()
        assert exc_info.value.code == ErrorCode.IO_ERROR

    def test_invalid_utf8_raises_parse_error(self, storage):
        storage.data_path.parent.mkdir(parents=True)
        storage.data_path.write_bytes(b'{"prompts": [], "version": "\xff"}')
        with pytest.raises(PromptBankError) as exc_info:
            storage.load()
        assert exc_info.value.code == ErrorCode.PARSE_ERROR

    def test_wrongly_typed_record_raises(self, storage, sample_bank):
        data = sample_bank.to_dict()
        data["prompts"][0]["description"] = None
        storage.data_path.parent.mkdir(parents=True)
        storage.data_path.write_text(json.dumps(data))
        with pytest.raises(PromptBankError) as exc_info:
            storage.load()
        assert exc_info.value.code == ErrorCode.PARSE_ERROR


class TestSave:
    def test_round_trip(self, storage, sample_bank):
        storage.save(sample_bank)
        assert storage.load() == sample_bank

    def test_creates_parent_directories(self, storage, sample_bank):
        storage.save(sample_bank)
        assert storage.data_path.exists()

    def test_file_format(self, storage, sample_bank):
        storage.save(sample_bank)
        data = json.loads(storage.data_path.read_text())
        assert data["version"] == "1.0"
        assert [p["category"] for p in data["prompts"]] == ["template", "custom:notes"]
        assert data["prompts"][0]["variables"] == ["name", "place"]

    def test_save_overwrites(self, storage, sample_bank):
        storage.save(sample_bank)
        storage.save(PromptBank())
        assert storage.load().prompts == []


class TestPersistence:
    def test_data_persists_across_instances(self, tmp_path, sample_bank):
        path = tmp_path / "persist.json"
        Storage(path).save(sample_bank)
        result = Storage(path).load().get("test-prompt")
        assert result.content == "Hello {{name}}, welcome to {{place}}"


class TestExportImport:
    def test_export_then_import(self, storage, sample_bank, tmp_path):
        out = tmp_path / "export.json"
        storage.export(sample_bank, out)
        assert storage.import_bank(out) == sample_bank

    def test_import_missing_file_raises(self, storage, tmp_path):
        with pytest.raises(PromptBankError) as exc_info:
            storage.import_bank(tmp_path / "nope.json")
        assert exc_info.value.code == ErrorCode.IO_ERROR

    def test_export_to_missing_directory_raises(self, storage, sample_bank, tmp_path):
        with pytest.raises(PromptBankError) as exc_info:
            storage.export(sample_bank, tmp_path / "no" / "such" / "dir.json")
        assert exc_info.value.code == ErrorCode.IO_ERROR
