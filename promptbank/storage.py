import json
import logging
from pathlib import Path

from .errors import PromptBankError
from .models import PromptBank

logger = logging.getLogger(__name__)


class Storage:
    """Reads and writes the whole prompt bank as a single JSON document."""

    def __init__(self, data_path: Path):
        self.data_path = Path(data_path)

    def load(self) -> PromptBank:
        if not self.data_path.exists():
            logger.debug(f"No data file at {self.data_path}, starting empty")
            return PromptBank()
        bank = self._read(self.data_path)
        logger.debug(f"Loaded {len(bank.prompts)} prompts from {self.data_path}")
        return bank

    def save(self, bank: PromptBank) -> None:
        try:
            self.data_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PromptBankError.io_error(str(e)) from e
        self._write(bank, self.data_path)
        logger.debug(f"Saved {len(bank.prompts)} prompts to {self.data_path}")

    def export(self, bank: PromptBank, path: Path) -> None:
        self._write(bank, Path(path))
        logger.debug(f"Exported {len(bank.prompts)} prompts to {path}")

    def import_bank(self, path: Path) -> PromptBank:
        bank = self._read(Path(path))
        logger.debug(f"Read {len(bank.prompts)} prompts from {path}")
        return bank

    def _read(self, path: Path) -> PromptBank:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise PromptBankError.io_error(str(e)) from e
        except UnicodeDecodeError as e:
            raise PromptBankError.parse_error(f"{path}: {e}") from e
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise PromptBankError.parse_error(f"{path}: {e}") from e
        return PromptBank.from_dict(data)

    def _write(self, bank: PromptBank, path: Path) -> None:
        try:
            path.write_text(
                json.dumps(bank.to_dict(), indent=2, ensure_ascii=False),
                encoding="utf-8",
            )
        except OSError as e:
            raise PromptBankError.io_error(str(e)) from e
