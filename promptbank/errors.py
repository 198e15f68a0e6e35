from enum import Enum


class ErrorCode(Enum):
    IO_ERROR = "io_error"
    PARSE_ERROR = "parse_error"
    PROMPT_NOT_FOUND = "prompt_not_found"
    INVALID_CATEGORY = "invalid_category"
    INVALID_INPUT = "invalid_input"
    INVALID_NAME = "invalid_name"
    STORAGE = "storage"
    CLIPBOARD = "clipboard"
    NETWORK = "network"


class PromptBankError(Exception):
    def __init__(self, code: ErrorCode, message: str):
        self.code = code
        self.message = message
        super().__init__(message)

    @classmethod
    def io_error(cls, detail: str) -> "PromptBankError":
        return cls(ErrorCode.IO_ERROR, f"IO error: {detail}")

    @classmethod
    def parse_error(cls, detail: str) -> "PromptBankError":
        return cls(ErrorCode.PARSE_ERROR, f"JSON error: {detail}")

    @classmethod
    def prompt_not_found(cls, key: str) -> "PromptBankError":
        return cls(ErrorCode.PROMPT_NOT_FOUND, f"Prompt not found: {key}")

    @classmethod
    def invalid_category(cls, value: str) -> "PromptBankError":
        return cls(ErrorCode.INVALID_CATEGORY, f"Invalid prompt category: {value}")

    @classmethod
    def invalid_input(cls, detail: str) -> "PromptBankError":
        return cls(ErrorCode.INVALID_INPUT, f"Invalid input: {detail}")

    @classmethod
    def invalid_name(cls, name: str) -> "PromptBankError":
        return cls(
            ErrorCode.INVALID_NAME,
            f"Invalid name: {name!r}. Must match ^[a-z0-9][a-z0-9_-]*$",
        )

    @classmethod
    def storage(cls, detail: str) -> "PromptBankError":
        return cls(ErrorCode.STORAGE, f"Storage error: {detail}")

    @classmethod
    def clipboard(cls, detail: str) -> "PromptBankError":
        return cls(ErrorCode.CLIPBOARD, f"Clipboard error: {detail}")

    @classmethod
    def network(cls, detail: str) -> "PromptBankError":
        return cls(ErrorCode.NETWORK, f"Network error: {detail}")
