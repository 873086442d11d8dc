"""Reading refinement input and the custom dictionary."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Union

PathLike = Union[str, Path]


class InputError(RuntimeError):
    """Raised when the text to refine cannot be obtained."""


class NoInputProvidedError(InputError):
    def __init__(self) -> None:
        super().__init__("No input provided: use --input or --file")


class EmptyInputError(InputError):
    def __init__(self) -> None:
        super().__init__("Input is empty")


class InputFileReadError(InputError):
    def __init__(self, path: PathLike, cause: str) -> None:
        self.path = str(path)
        self.cause = cause
        super().__init__(f"Failed to read file '{self.path}': {cause}")


class DictionaryReadError(InputError):
    def __init__(self, path: PathLike, cause: str) -> None:
        self.path = str(path)
        self.cause = cause
        super().__init__(
            f"Cannot read dictionary file '{self.path}': {cause}. "
            "Please check if the file exists and you have permission to access it."
        )


def read_input(input_text: Optional[str] = None, file_path: Optional[PathLike] = None) -> str:
    """Return the text to refine from inline text or a file.

    Inline text takes precedence; the CLI keeps the two mutually exclusive.
    """
    if input_text is not None:
        if not input_text.strip():
            raise EmptyInputError()
        return input_text

    if file_path is not None:
        try:
            content = Path(file_path).read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise InputFileReadError(file_path, str(exc)) from exc
        if not content.strip():
            raise EmptyInputError()
        return content

    raise NoInputProvidedError()


def load_dictionary(path: Optional[PathLike]) -> List[str]:
    """Load dictionary terms, one per line, skipping blanks and ``#`` comments."""
    if not path:
        return []
    try:
        content = Path(path).read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DictionaryReadError(path, str(exc)) from exc

    words = []
    for line in content.splitlines():
        term = line.strip()
        if term and not term.startswith("#"):
            words.append(term)
    return words
